"""
Entity identifier conventions.

Generated IDs are opaque (the app produces 24 random lowercase alphanumerics).
Well-known IDs are reserved for standard design models:

    "well-known:" + reverse DNS token [+ "@" + version]
    e.g. "well-known:edu.washington.hcde.engineering-design@1"
"""

from __future__ import annotations

import re
import secrets
import string
from enum import Enum
from typing import List, NamedTuple, Optional

from DesignAwareness.config import Settings, get_settings
from DesignAwareness.errors import ErrorKind, Violation, join_path

WELL_KNOWN_PREFIX = "well-known:"
GENERATED_ID_LENGTH = 24
GENERATED_ID_ALPHABET = string.ascii_lowercase + string.digits

_SEGMENT = r"[a-z0-9]+(?:-[a-z0-9]+)*"
_WELL_KNOWN_RE = re.compile(
    rf"^{re.escape(WELL_KNOWN_PREFIX)}(?P<namespace>{_SEGMENT}(?:\.{_SEGMENT})+)(?:@(?P<version>\d+))?$"
)
_STRICT_GENERATED_RE = re.compile(rf"^[A-Za-z0-9]{{{GENERATED_ID_LENGTH}}}$")


class IdKind(str, Enum):
    GENERATED = "generated"
    WELL_KNOWN = "well-known"


class IdClassification(NamedTuple):
    kind: IdKind
    valid: bool


class WellKnownId(NamedTuple):
    namespace: str
    version: Optional[int]


def classify(entity_id: str, settings: Optional[Settings] = None) -> IdClassification:
    settings = settings or get_settings()
    if entity_id.startswith(WELL_KNOWN_PREFIX):
        return IdClassification(IdKind.WELL_KNOWN, _WELL_KNOWN_RE.match(entity_id) is not None)

    if settings.strict_generated_ids:
        valid = _STRICT_GENERATED_RE.match(entity_id) is not None
    else:
        valid = bool(entity_id)
    return IdClassification(IdKind.GENERATED, valid)


def parse_well_known(entity_id: str) -> Optional[WellKnownId]:
    match = _WELL_KNOWN_RE.match(entity_id)
    if match is None:
        return None
    version = match.group("version")
    return WellKnownId(match.group("namespace"), int(version) if version is not None else None)


def generate_id() -> str:
    return "".join(secrets.choice(GENERATED_ID_ALPHABET) for _ in range(GENERATED_ID_LENGTH))


def check_id(entity_id: str, path: str = "", *, allow_well_known: bool = False,
             settings: Optional[Settings] = None) -> List[Violation]:
    """Shape checks for any entity's ``id``; ``path`` locates the owning entity."""
    id_path = join_path(path, "id")
    kind, valid = classify(entity_id, settings)

    if kind is IdKind.WELL_KNOWN:
        if not allow_well_known:
            return [Violation(ErrorKind.FORMAT, id_path, "well-known IDs are reserved for design models")]
        if not valid:
            return [Violation(ErrorKind.FORMAT, id_path,
                              f"'{entity_id}' is not '{WELL_KNOWN_PREFIX}<reverse-dns>[@<version>]'")]
        return []

    if not valid:
        if not entity_id:
            return [Violation(ErrorKind.FORMAT, id_path, "ID must not be empty")]
        return [Violation(ErrorKind.FORMAT, id_path,
                          f"'{entity_id}' is not a {GENERATED_ID_LENGTH}-character alphanumeric ID")]
    return []


def check_design_model_id(model_id: str, well_known: bool, path: str = "",
                          settings: Optional[Settings] = None) -> List[Violation]:
    """The ``wellKnown`` flag must agree with the ID's classification."""
    violations = check_id(model_id, path, allow_well_known=True, settings=settings)
    is_well_known = classify(model_id, settings).kind is IdKind.WELL_KNOWN
    if well_known != is_well_known:
        violations.append(Violation(
            ErrorKind.FORMAT,
            join_path(path, "wellKnown"),
            f"wellKnown is {str(well_known).lower()} but ID '{model_id}' "
            f"{'has' if is_well_known else 'does not have'} the '{WELL_KNOWN_PREFIX}' prefix",
        ))
    return violations


def validate_design_model(model, settings: Optional[Settings] = None) -> List[Violation]:
    """Convenience wrapper for an already-parsed DesignModel."""
    return check_design_model_id(model.id, bool(model.well_known), settings=settings)
