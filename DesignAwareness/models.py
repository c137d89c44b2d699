from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import (BaseModel, BeforeValidator, ConfigDict, Field,
                      PlainSerializer, StrictBool, StrictInt, StrictStr,
                      field_validator)
from pydantic.alias_generators import to_camel

from DesignAwareness.periods import PeriodConfig, Weekday, period_config
from DesignAwareness.utils import format_timestamp, parse_timestamp

Timestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]
HexColor = Annotated[StrictStr, Field(pattern=r"^[0-9A-Fa-f]{6}$")]
Millis = Annotated[StrictInt, Field(ge=0)]

# [on, off] in session-relative milliseconds; off == -1 means "still on"
RealtimeActivityTimingPair = Tuple[StrictInt, StrictInt]
RealtimeActivityRecord = List[RealtimeActivityTimingPair]


class DAModel(BaseModel):
    """
    Base for every wire type. Attributes are snake_case, the wire is camelCase.
    Optional fields are None until DesignAwareness.defaults fills them.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# --- Design models ---
class Activity(DAModel):
    name: StrictStr
    code: StrictStr = Field(description="Short uppercase abbreviation, e.g. 'PD'")
    color: Tuple[HexColor, HexColor] = Field(description="[light theme, dark theme] hex colors without '#'")
    description: Optional[StrictStr] = None


class DesignModelDescription(DAModel):
    description: StrictStr
    image_url: Optional[Union[StrictStr, List[StrictStr]]] = Field(None, alias="imageURL")
    citation: Optional[StrictStr] = None
    more_info_url: Optional[StrictStr] = Field(None, alias="moreInfoURL")

    @field_validator('image_url', mode='before')
    @classmethod
    def check_image_url(cls, v):
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, list) and all(isinstance(item, str) for item in v):
            return v
        raise ValueError("imageURL must be a string or a list of strings")


class DesignModel(DAModel):
    id: StrictStr
    name: StrictStr
    activities: List[Activity]
    description: Optional[DesignModelDescription] = None
    well_known: Optional[StrictBool] = None


# --- Notes ---
class ProjectNote(DAModel):
    id: StrictStr
    content: StrictStr
    created: Optional[Timestamp] = None


class TimedNote(ProjectNote):
    time: Millis = Field(description="Session-relative time in milliseconds")


# --- Shared project fields ---
class ProjectMetadata(DAModel):
    id: StrictStr
    name: StrictStr
    description: Optional[StrictStr] = None
    created: Optional[Timestamp] = None
    modified: Optional[Timestamp] = None
    active: Optional[StrictBool] = None
    design_model: DesignModel
    notes: Optional[List[ProjectNote]] = None


# --- Realtime tracking ---
class RealtimeSession(DAModel):
    id: StrictStr
    duration: Millis
    start: Timestamp
    data: List[RealtimeActivityRecord] = Field(description="One record per design model activity, same order")
    notes: Optional[List[TimedNote]] = None


class RealtimeProject(ProjectMetadata):
    sessions: List[RealtimeSession]


# --- Async tracking ---
class AsyncActivityData(DAModel):
    value: Annotated[StrictInt, Field(ge=0, description="Minutes spent on the activity")]
    note: Optional[StrictStr] = None


class AsyncEntry(DAModel):
    id: StrictStr
    data: List[AsyncActivityData]
    period: Timestamp
    note: Optional[StrictStr] = None
    created: Optional[Timestamp] = None
    modified: Optional[Timestamp] = None


class AsyncProject(ProjectMetadata):
    reporting_period: Literal["day", "week"]
    period_alignment: Optional[Weekday] = None
    entries: List[AsyncEntry]

    @field_validator('period_alignment', mode='before')
    @classmethod
    def check_period_alignment(cls, v):
        # the enum alone would coerce true, 1.0 and "1"
        if v is None or (isinstance(v, int) and not isinstance(v, bool)):
            return v
        raise ValueError(f"periodAlignment must be an integer weekday 0-6, got {type(v).__name__}")

    @property
    def period_config(self) -> PeriodConfig:
        return period_config(self.reporting_period,
                             self.period_alignment if self.period_alignment is not None else Weekday.SUNDAY)


ENTITY_MODELS: Dict[str, Type[DAModel]] = {
    "AsyncEntry": AsyncEntry,
    "AsyncProject": AsyncProject,
    "DesignModel": DesignModel,
    "ProjectNote": ProjectNote,
    "RealtimeProject": RealtimeProject,
    "RealtimeSession": RealtimeSession,
    "TimedNote": TimedNote,
}


def entity_type_of(entity: Any) -> str:
    for name, model in ENTITY_MODELS.items():
        if type(entity) is model:
            return name
    raise TypeError(f"{type(entity).__name__} is not a Design Awareness entity")
