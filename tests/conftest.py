import copy
import json
from datetime import datetime, timezone

import pytest

from DesignAwareness.config import Settings

FIXED_NOW = datetime(2021, 7, 1, 12, 0, 0, tzinfo=timezone.utc)

DESIGN_MODEL = {
    "id": "well-known:edu.washington.hcde.engineering-design@1",
    "name": "Engineering Design",
    "wellKnown": True,
    "description": {
        "description": "A model of the engineering design process.\n\nSecond paragraph.",
        "citation": "Atman et al.",
    },
    "activities": [
        {"name": "Problem Definition", "code": "PD", "color": ["0C8375", "14B8A5"]},
        {"name": "Idea Generation", "code": "IG", "color": ["AA3377", "EE66AA"],
         "description": "Brainstorming possible solutions"},
    ],
}

REALTIME_PROJECT = {
    "id": "kobyeor9a9y5cca9iufm8jjv",
    "name": "Capstone",
    "created": "2021-06-01T10:00:00.000Z",
    "designModel": DESIGN_MODEL,
    "sessions": [
        {
            "id": "s0000000000000000000000a",
            "duration": 1000,
            "start": "2021-06-02T15:00:00.000Z",
            "data": [
                [[0, 100], [150, 300]],
                [[100, 150], [300, 1000]],
            ],
            "notes": [{"id": "n0000000000000000000000a", "content": "switched tools", "time": 150}],
        },
    ],
}

ASYNC_PROJECT = {
    "id": "p0000000000000000000000b",
    "name": "Studio course",
    "designModel": DESIGN_MODEL,
    "reportingPeriod": "week",
    "periodAlignment": 1,
    "entries": [
        {
            "id": "e0000000000000000000000a",
            "period": "2021-06-21T00:00:00.000Z",
            "data": [{"value": 30}, {"value": 45, "note": "sketching"}],
        },
        {
            "id": "e0000000000000000000000b",
            "period": "2021-06-28T00:00:00.000Z",
            "data": [{"value": 0}, {"value": 120}],
        },
    ],
    "notes": [{"id": "n0000000000000000000000b", "content": "kickoff", "created": "2021-06-20T09:00:00Z"}],
}


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def design_model():
    return copy.deepcopy(DESIGN_MODEL)


@pytest.fixture
def realtime_project():
    return copy.deepcopy(REALTIME_PROJECT)


@pytest.fixture
def async_project():
    return copy.deepcopy(ASYNC_PROJECT)


def make_document(entity_type, data, **extra) -> bytes:
    envelope = {"$format": "design-awareness", "version": "1.0.0", "type": entity_type, "data": data}
    envelope.update(extra)
    return json.dumps(envelope).encode("utf-8")


@pytest.fixture
def document():
    return make_document
