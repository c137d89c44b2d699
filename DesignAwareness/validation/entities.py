"""
Entity validation: structure, defaults, invariants.

For each document the validator

1. checks required fields and primitive shapes (pydantic),
2. fills absent optional fields with their documented defaults,
3. walks the raw tree and checks cross-field and cross-entity invariants.

It never stops at the first problem. Step 3 runs even when step 1 failed;
each check only needs the part of the tree it reads, so a broken session does
not hide problems in its siblings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from DesignAwareness.config import Settings, get_settings
from DesignAwareness.defaults import (DEFAULT_PERIOD_ALIGNMENT,
                                      DEFAULT_WELL_KNOWN, fill_defaults)
from DesignAwareness.errors import (DocumentError, ErrorKind, UnknownTypeError,
                                    Violation, index_path, join_path)
from DesignAwareness.ids import check_design_model_id, check_id
from DesignAwareness.models import (ENTITY_MODELS, AsyncProject, DAModel,
                                    RealtimeProject)
from DesignAwareness.periods import PeriodConfig, is_normalized, period_config
from DesignAwareness.utils import Clock, format_timestamp, parse_timestamp, utc_now
from DesignAwareness.validation.references import (IdRegistry, activity_count,
                                                   check_activity_correspondence)
from DesignAwareness.validation.structure import violations_from_pydantic
from DesignAwareness.validation.timing import validate_record

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectContext:
    """
    What a lone component (session, entry) needs from its owning project.
    Unknown fields skip the checks that depend on them.
    """
    activity_count: Optional[int] = None
    period: Optional[PeriodConfig] = None
    session_ongoing: bool = False

    @classmethod
    def for_project(cls, project: DAModel, session_ongoing: bool = False) -> "ProjectContext":
        if not isinstance(project, (AsyncProject, RealtimeProject)):
            raise TypeError(f"{type(project).__name__} is not a project")
        period = project.period_config if isinstance(project, AsyncProject) else None
        return cls(len(project.design_model.activities), period, session_ongoing)


@dataclass
class ValidationResult:
    entity_type: Optional[str]
    entity: Optional[DAModel]
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> DAModel:
        if self.violations:
            raise DocumentError(self.violations)
        return self.entity


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _timing_pairs(record: Any) -> Optional[list]:
    if not isinstance(record, list):
        return None
    for pair in record:
        if not (isinstance(pair, (list, tuple)) and len(pair) == 2 and all(_is_int(v) for v in pair)):
            return None
    return [tuple(pair) for pair in record]


class _InvariantWalker:
    """Walks raw wire data (camelCase keys) and collects invariant violations."""

    def __init__(self, settings: Settings, context: ProjectContext):
        self.settings = settings
        self.context = context
        self.ids = IdRegistry()
        self.violations: List[Violation] = []

    def report(self, kind: ErrorKind, path: str, message: str) -> None:
        self.violations.append(Violation(kind, path, message))

    def add(self, violation: Optional[Violation]) -> None:
        if violation is not None:
            self.violations.append(violation)

    # --- shared pieces ---
    def entity_id(self, data: dict, path: str, allow_well_known: bool = False) -> None:
        entity_id = data.get("id")
        if not isinstance(entity_id, str):
            return
        self.violations.extend(check_id(entity_id, path, allow_well_known=allow_well_known,
                                        settings=self.settings))
        self.add(self.ids.register(entity_id, join_path(path, "id")))

    def each(self, data: dict, key: str, path: str, visit: Callable[[Any, str], None]) -> None:
        items = data.get(key)
        if not isinstance(items, list):
            return
        list_path = join_path(path, key)
        for index, item in enumerate(items):
            visit(item, index_path(list_path, index))

    # --- entities ---
    def design_model(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            return
        model_id = data.get("id")
        well_known = data.get("wellKnown")
        if well_known is None:
            well_known = DEFAULT_WELL_KNOWN
        if isinstance(model_id, str):
            if isinstance(well_known, bool):
                self.violations.extend(check_design_model_id(model_id, well_known, path, self.settings))
            else:
                self.violations.extend(check_id(model_id, path, allow_well_known=True, settings=self.settings))
            self.add(self.ids.register(model_id, join_path(path, "id")))
        self.each(data, "activities", path, self.activity)

    def activity(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            return
        code = data.get("code")
        if not isinstance(code, str):
            return
        if not code:
            self.report(ErrorKind.FORMAT, join_path(path, "code"), "activity code must not be empty")
        elif code != code.upper():
            self.report(ErrorKind.FORMAT, join_path(path, "code"), f"activity code '{code}' must be uppercase")

    def project_note(self, data: Any, path: str) -> None:
        if isinstance(data, dict):
            self.entity_id(data, path)

    def timed_note(self, data: Any, path: str, duration: Optional[int] = None) -> None:
        if not isinstance(data, dict):
            return
        self.entity_id(data, path)
        time = data.get("time")
        # negative times are reported as structure/range errors by the model
        if duration is not None and _is_int(time) and time > duration:
            self.report(ErrorKind.RANGE, join_path(path, "time"),
                        f"note time {time} is outside the session (0-{duration} ms)")

    def realtime_session(self, data: Any, path: str, expected_activities: Optional[int] = None,
                         ongoing: bool = False) -> None:
        if not isinstance(data, dict):
            return
        self.entity_id(data, path)

        duration = data.get("duration")
        if not (_is_int(duration) and duration >= 0):
            duration = None

        records = data.get("data")
        data_path = join_path(path, "data")
        self.add(check_activity_correspondence(records, expected_activities, data_path))
        if isinstance(records, list):
            for record_index, record in enumerate(records):
                pairs = _timing_pairs(record)
                if pairs is None:
                    continue
                record_path = index_path(data_path, record_index)
                for index, kind, message in validate_record(pairs, duration, ongoing):
                    self.report(kind, index_path(record_path, index), message)

        self.each(data, "notes", path, lambda note, note_path: self.timed_note(note, note_path, duration))

    def async_entry(self, data: Any, path: str, expected_activities: Optional[int] = None,
                    period: Optional[PeriodConfig] = None) -> None:
        if not isinstance(data, dict):
            return
        self.entity_id(data, path)
        self.add(check_activity_correspondence(data.get("data"), expected_activities, join_path(path, "data")))

        if period is None or not self.settings.require_normalized_periods:
            return
        try:
            value = parse_timestamp(data.get("period"))
        except ValueError:
            return
        if not is_normalized(value, period):
            self.report(ErrorKind.FORMAT, join_path(path, "period"),
                        f"period {format_timestamp(value)} is not normalized; "
                        f"expected {format_timestamp(period.normalize(value))}")

    def _project_metadata(self, data: dict, path: str) -> Optional[int]:
        self.entity_id(data, path)
        self.design_model(data.get("designModel"), join_path(path, "designModel"))
        self.each(data, "notes", path, self.project_note)
        return activity_count(data.get("designModel"))

    def realtime_project(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            return
        expected = self._project_metadata(data, path)
        self.each(data, "sessions", path,
                  lambda session, session_path: self.realtime_session(session, session_path, expected))

    def async_project(self, data: Any, path: str) -> None:
        if not isinstance(data, dict):
            return
        expected = self._project_metadata(data, path)
        alignment = data.get("periodAlignment")
        if alignment is None:
            alignment = DEFAULT_PERIOD_ALIGNMENT
        try:
            # a bad reportingPeriod/periodAlignment is already a structural/range error
            period = period_config(data.get("reportingPeriod"), alignment) if _is_int(alignment) else None
        except ValueError:
            period = None
        self.each(data, "entries", path,
                  lambda entry, entry_path: self.async_entry(entry, entry_path, expected, period))

    def walk(self, entity_type: str, data: Any) -> List[Violation]:
        context = self.context
        if entity_type == "DesignModel":
            self.design_model(data, "")
        elif entity_type == "ProjectNote":
            self.project_note(data, "")
        elif entity_type == "TimedNote":
            self.timed_note(data, "")
        elif entity_type == "RealtimeSession":
            self.realtime_session(data, "", context.activity_count, context.session_ongoing)
        elif entity_type == "AsyncEntry":
            self.async_entry(data, "", context.activity_count, context.period)
        elif entity_type == "RealtimeProject":
            self.realtime_project(data, "")
        elif entity_type == "AsyncProject":
            self.async_project(data, "")
        return self.violations


def validate_entity(entity_type: str, data: Any, *, clock: Clock = utc_now,
                    context: Optional[ProjectContext] = None,
                    settings: Optional[Settings] = None) -> ValidationResult:
    """
    Validate one entity's wire data. The returned result carries the parsed,
    defaulted entity whenever the structure was sound (even if invariants
    failed, so a caller can attempt repair) and every violation found.
    """
    if entity_type not in ENTITY_MODELS:
        raise UnknownTypeError(f"unknown entity type {entity_type!r}", "type")
    settings = settings or get_settings()
    context = context or ProjectContext()

    violations: List[Violation] = []
    entity: Optional[DAModel] = None
    try:
        entity = ENTITY_MODELS[entity_type].model_validate(data)
    except ValidationError as exc:
        violations.extend(violations_from_pydantic(exc))
    else:
        fill_defaults(entity_type, entity, clock())

    violations.extend(_InvariantWalker(settings, context).walk(entity_type, data))

    if violations:
        log.debug(f"{entity_type}: {len(violations)} violation(s)")
    else:
        log.debug(f"{entity_type}: valid")
    return ValidationResult(entity_type, entity, violations)
