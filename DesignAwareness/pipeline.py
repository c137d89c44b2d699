"""
Document pipeline: envelope codec + entity validator.

    validate_document(raw) -> ValidationResult   (never raises for bad input)
    decode(raw)            -> entity             (raises DocumentError)
    encode(type, entity)   -> bytes              (defaults filled, all fields emitted)
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from DesignAwareness import envelope
from DesignAwareness.config import Settings, get_settings
from DesignAwareness.defaults import fill_defaults
from DesignAwareness.errors import (DocumentError, EnvelopeError, ErrorKind,
                                    StructuralError, UnknownTypeError,
                                    Violation)
from DesignAwareness.models import ENTITY_MODELS, DAModel
from DesignAwareness.utils import Clock, utc_now
from DesignAwareness.validation.entities import (ProjectContext,
                                                 ValidationResult,
                                                 validate_entity)

log = logging.getLogger(__name__)

RawDocument = Union[bytes, bytearray, str]


def validate_document(raw: RawDocument, *, clock: Clock = utc_now,
                      context: Optional[ProjectContext] = None,
                      roots_only: bool = False,
                      settings: Optional[Settings] = None) -> ValidationResult:
    """
    Run a serialized document through every check. Envelope problems stop
    here with a single violation; payload problems are all collected.
    ``roots_only`` restricts the document type to settings.root_types.
    """
    settings = settings or get_settings()
    try:
        env = envelope.decode(raw)
    except EnvelopeError as exc:
        log.warning(f"Rejected document envelope: {exc.violation}")
        return ValidationResult(None, None, [exc.violation])

    if roots_only and env.type not in settings.root_types:
        violation = Violation(ErrorKind.UNKNOWN_TYPE, "type",
                              f"{env.type} is not accepted as a document root "
                              f"(expected one of {', '.join(settings.root_types)})")
        log.warning(f"Rejected document: {violation}")
        return ValidationResult(env.type, None, [violation])

    result = validate_entity(env.type, env.data, clock=clock, context=context, settings=settings)
    if result.ok:
        log.info(f"Accepted {env.type} document")
    else:
        log.warning(f"{env.type} document has {len(result.violations)} violation(s)")
    return result


def decode(raw: RawDocument, **kwargs) -> DAModel:
    """Validated, defaulted entity, or DocumentError listing every violation."""
    return validate_document(raw, **kwargs).raise_for_violations()


def to_data(entity_type: str, entity: DAModel, *, clock: Clock = utc_now) -> Any:
    """JSON-ready wire data with every optional field present."""
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        raise UnknownTypeError(f"unknown entity type {entity_type!r}", "type")
    if type(entity) is not model:
        raise StructuralError(f"expected a {entity_type}, got {type(entity).__name__}")

    filled = fill_defaults(entity_type, entity.model_copy(deep=True), clock())
    return filled.model_dump(mode="json", by_alias=True)


def encode(entity_type: str, entity: DAModel, meta: Any = None, *, clock: Clock = utc_now,
           validate: bool = True, settings: Optional[Settings] = None) -> bytes:
    """
    Serialize an entity inside a fresh envelope. ``meta`` is written only for
    this call. With ``validate`` the emitted data is checked first and a
    DocumentError is raised instead of exporting an invalid document.
    """
    settings = settings or get_settings()
    data = to_data(entity_type, entity, clock=clock)
    if validate:
        result = validate_entity(entity_type, data, clock=clock, settings=settings)
        if not result.ok:
            log.warning(f"Refusing to encode invalid {entity_type}: {len(result.violations)} violation(s)")
            raise DocumentError(result.violations)
    return envelope.encode(entity_type, data, meta, indent=settings.json_indent)
