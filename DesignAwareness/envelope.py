"""Top-level transport wrapper: {$format, version, type, data, meta?}."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from DesignAwareness.errors import FormatError, StructuralError, UnknownTypeError

log = logging.getLogger(__name__)

FORMAT_TAG = "design-awareness"
CURRENT_VERSION = "1.0.0"
SUPPORTED_VERSIONS = frozenset({CURRENT_VERSION})

ENTITY_TYPES = (
    "AsyncEntry",
    "AsyncProject",
    "DesignModel",
    "ProjectNote",
    "RealtimeProject",
    "RealtimeSession",
    "TimedNote",
)


@dataclass(frozen=True)
class Envelope:
    type: str
    data: Any
    meta: Any = None


def decode(raw: Union[bytes, bytearray, str]) -> Envelope:
    """
    Parse and check the envelope only. The payload under ``data`` is handed
    back untouched; ``meta`` is passed through without being looked at.
    Raises FormatError, StructuralError or UnknownTypeError on the first problem.
    """
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise FormatError(f"document is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise StructuralError(f"envelope must be a JSON object, got {type(payload).__name__}")

    if payload.get("$format") != FORMAT_TAG:
        raise FormatError(f"'$format' must be '{FORMAT_TAG}'", "$format")

    version = payload.get("version")
    if not isinstance(version, str) or version not in SUPPORTED_VERSIONS:
        raise FormatError(f"unrecognized version {version!r}", "version")

    if "type" not in payload:
        raise StructuralError("envelope is missing 'type'", "type")
    entity_type = payload["type"]
    if not isinstance(entity_type, str) or entity_type not in ENTITY_TYPES:
        raise UnknownTypeError(f"unknown entity type {entity_type!r}", "type")

    if "data" not in payload:
        raise StructuralError("envelope is missing 'data'", "data")

    log.debug(f"Decoded envelope for {entity_type} (meta present: {'meta' in payload})")
    return Envelope(type=entity_type, data=payload["data"], meta=payload.get("meta"))


def encode(entity_type: str, data: Any, meta: Any = None, *, indent: Optional[int] = None) -> bytes:
    """Wrap already-serialized entity data. ``meta`` is written only when given."""
    if entity_type not in ENTITY_TYPES:
        raise UnknownTypeError(f"unknown entity type {entity_type!r}", "type")

    envelope = {
        "$format": FORMAT_TAG,
        "version": CURRENT_VERSION,
        "type": entity_type,
        "data": data,
    }
    if meta is not None:
        envelope["meta"] = meta

    log.debug(f"Encoding envelope for {entity_type}")
    return json.dumps(envelope, ensure_ascii=False, indent=indent).encode("utf-8")
