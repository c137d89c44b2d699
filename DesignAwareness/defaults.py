"""
Explicit default-filling, one function per entity type.

Every optional wire field is None on a freshly parsed model; after the matching
``fill_*`` function runs none of them are. ``now`` is supplied by the caller so
all defaulted timestamps in one document agree and tests can pin the clock.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict

from DesignAwareness.models import (Activity, AsyncEntry, AsyncProject,
                                    DAModel, DesignModel, ProjectMetadata,
                                    ProjectNote, RealtimeProject,
                                    RealtimeSession, TimedNote)
from DesignAwareness.periods import Weekday

DEFAULT_ACTIVE = True
DEFAULT_WELL_KNOWN = False
DEFAULT_PERIOD_ALIGNMENT = Weekday.SUNDAY


def fill_activity_defaults(activity: Activity, now: datetime) -> Activity:
    if activity.description is None:
        activity.description = ""
    return activity


def fill_design_model_defaults(model: DesignModel, now: datetime) -> DesignModel:
    if model.well_known is None:
        model.well_known = DEFAULT_WELL_KNOWN
    # description stays None ("no description") when absent
    if model.description is not None:
        if model.description.image_url is None:
            model.description.image_url = []
        if model.description.citation is None:
            model.description.citation = ""
        if model.description.more_info_url is None:
            model.description.more_info_url = ""
    for activity in model.activities:
        fill_activity_defaults(activity, now)
    return model


def fill_project_note_defaults(note: ProjectNote, now: datetime) -> ProjectNote:
    if note.created is None:
        note.created = now
    return note


def fill_timed_note_defaults(note: TimedNote, now: datetime) -> TimedNote:
    return fill_project_note_defaults(note, now)


def fill_realtime_session_defaults(session: RealtimeSession, now: datetime) -> RealtimeSession:
    if session.notes is None:
        session.notes = []
    for note in session.notes:
        fill_timed_note_defaults(note, now)
    return session


def fill_async_entry_defaults(entry: AsyncEntry, now: datetime) -> AsyncEntry:
    if entry.note is None:
        entry.note = ""
    if entry.created is None:
        entry.created = now
    if entry.modified is None:
        entry.modified = now
    for item in entry.data:
        if item.note is None:
            item.note = ""
    return entry


def _fill_project_metadata(project: ProjectMetadata, now: datetime) -> None:
    if project.description is None:
        project.description = ""
    if project.created is None:
        project.created = now
    if project.modified is None:
        project.modified = now
    if project.active is None:
        project.active = DEFAULT_ACTIVE
    if project.notes is None:
        project.notes = []
    for note in project.notes:
        fill_project_note_defaults(note, now)
    fill_design_model_defaults(project.design_model, now)


def fill_realtime_project_defaults(project: RealtimeProject, now: datetime) -> RealtimeProject:
    _fill_project_metadata(project, now)
    for session in project.sessions:
        fill_realtime_session_defaults(session, now)
    return project


def fill_async_project_defaults(project: AsyncProject, now: datetime) -> AsyncProject:
    _fill_project_metadata(project, now)
    if project.period_alignment is None:
        project.period_alignment = DEFAULT_PERIOD_ALIGNMENT
    for entry in project.entries:
        fill_async_entry_defaults(entry, now)
    return project


DEFAULT_FILLERS: Dict[str, Callable[[DAModel, datetime], DAModel]] = {
    "AsyncEntry": fill_async_entry_defaults,
    "AsyncProject": fill_async_project_defaults,
    "DesignModel": fill_design_model_defaults,
    "ProjectNote": fill_project_note_defaults,
    "RealtimeProject": fill_realtime_project_defaults,
    "RealtimeSession": fill_realtime_session_defaults,
    "TimedNote": fill_timed_note_defaults,
}


def fill_defaults(entity_type: str, entity: DAModel, now: datetime) -> DAModel:
    """Fill every absent optional field of ``entity`` (and its children) in place."""
    return DEFAULT_FILLERS[entity_type](entity, now)
