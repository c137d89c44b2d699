import json

import pytest

from DesignAwareness import pipeline
from DesignAwareness.config import Settings
from DesignAwareness.errors import (DocumentError, ErrorKind, StructuralError,
                                    UnknownTypeError)
from DesignAwareness.models import AsyncProject, RealtimeProject


@pytest.mark.parametrize("entity_type, fixture, pick", [
    ("RealtimeProject", "realtime_project", lambda d: d),
    ("AsyncProject", "async_project", lambda d: d),
    ("DesignModel", "design_model", lambda d: d),
    ("RealtimeSession", "realtime_project", lambda d: d["sessions"][0]),
    ("TimedNote", "realtime_project", lambda d: d["sessions"][0]["notes"][0]),
    ("AsyncEntry", "async_project", lambda d: d["entries"][0]),
    ("ProjectNote", "async_project", lambda d: d["notes"][0]),
])
def test_round_trip(entity_type, fixture, pick, document, clock, settings, request):
    data = pick(request.getfixturevalue(fixture))
    entity = pipeline.decode(document(entity_type, data), clock=clock, settings=settings)

    raw = pipeline.encode(entity_type, entity, clock=clock, settings=settings)
    assert pipeline.decode(raw, clock=clock, settings=settings) == entity


def test_encode_emits_every_field(async_project, document, clock, settings):
    project = pipeline.decode(document("AsyncProject", async_project), clock=clock, settings=settings)
    data = json.loads(pipeline.encode("AsyncProject", project, clock=clock, settings=settings))["data"]

    assert data["description"] == ""
    assert data["active"] is True
    assert data["created"] == "2021-07-01T12:00:00.000Z"
    assert data["periodAlignment"] == 1
    assert data["designModel"]["wellKnown"] is True
    assert data["designModel"]["description"]["imageURL"] == []
    assert data["designModel"]["description"]["moreInfoURL"] == ""
    assert data["entries"][0]["data"][0] == {"value": 30, "note": ""}
    assert data["notes"][0]["created"] == "2021-06-20T09:00:00.000Z"


def test_encode_fills_defaults_on_unfilled_models(clock, settings):
    project = RealtimeProject.model_validate({
        "id": "r1",
        "name": "Bare",
        "designModel": {"id": "m1", "name": "M", "activities": []},
        "sessions": [],
    })
    data = json.loads(pipeline.encode("RealtimeProject", project, clock=clock, settings=settings))["data"]
    assert data["modified"] == "2021-07-01T12:00:00.000Z"
    assert data["designModel"]["wellKnown"] is False
    assert data["designModel"]["description"] is None
    # the caller's model is left as it was
    assert project.created is None


def test_meta_is_written_but_not_kept(realtime_project, document, clock, settings):
    raw = document("RealtimeProject", realtime_project, meta={"exportedBy": "someone"})
    project = pipeline.decode(raw, clock=clock, settings=settings)

    plain = json.loads(pipeline.encode("RealtimeProject", project, clock=clock, settings=settings))
    assert "meta" not in plain

    tagged = json.loads(pipeline.encode("RealtimeProject", project, {"n": 1}, clock=clock, settings=settings))
    assert tagged["meta"] == {"n": 1}


def test_encode_refuses_invalid_entities(design_model, clock, settings):
    model = pipeline.decode(
        json.dumps({"$format": "design-awareness", "version": "1.0.0", "type": "DesignModel", "data": design_model}),
        clock=clock, settings=settings)
    model.activities[0].code = "pd"

    with pytest.raises(DocumentError) as excinfo:
        pipeline.encode("DesignModel", model, clock=clock, settings=settings)
    assert excinfo.value.violations[0].path == "activities[0].code"

    # validation can be turned off for repair workflows
    assert pipeline.encode("DesignModel", model, clock=clock, settings=settings, validate=False)


def test_encode_checks_the_declared_type(async_project, document, clock, settings):
    project = pipeline.decode(document("AsyncProject", async_project), clock=clock, settings=settings)
    with pytest.raises(StructuralError):
        pipeline.encode("RealtimeProject", project, clock=clock, settings=settings)
    with pytest.raises(UnknownTypeError):
        pipeline.encode("Foo", project, clock=clock, settings=settings)


def test_bad_envelope_becomes_a_single_violation(settings):
    result = pipeline.validate_document(b"{", settings=settings)
    assert result.entity is None
    assert [v.kind for v in result.violations] == [ErrorKind.FORMAT]


def test_decode_raises_with_every_violation(realtime_project, document, clock, settings):
    realtime_project["sessions"][0]["data"][0][1] = [150, 2000]
    realtime_project["sessions"][0]["notes"][0]["time"] = 5000
    with pytest.raises(DocumentError) as excinfo:
        pipeline.decode(document("RealtimeProject", realtime_project), clock=clock, settings=settings)
    assert [(v.kind, v.path) for v in excinfo.value.violations] == [
        (ErrorKind.RANGE, "sessions[0].data[0][1]"),
        (ErrorKind.RANGE, "sessions[0].notes[0].time"),
    ]


def test_roots_only(design_model, async_project, document, clock, settings):
    result = pipeline.validate_document(document("DesignModel", design_model), roots_only=True,
                                        clock=clock, settings=settings)
    assert [(v.kind, v.path) for v in result.violations] == [(ErrorKind.UNKNOWN_TYPE, "type")]

    project = pipeline.decode(document("AsyncProject", async_project), roots_only=True,
                              clock=clock, settings=settings)
    assert isinstance(project, AsyncProject)

    only_async = Settings(root_types=["AsyncProject"])
    result = pipeline.validate_document(document("RealtimeProject", {}), roots_only=True, settings=only_async)
    assert [(v.kind, v.path) for v in result.violations] == [(ErrorKind.UNKNOWN_TYPE, "type")]


def test_unnormalized_period_through_the_pipeline(async_project, document, clock, settings):
    async_project["entries"][0]["period"] = "2021-06-23T01:33:40.908Z"
    result = pipeline.validate_document(document("AsyncProject", async_project), clock=clock, settings=settings)
    assert [(v.kind, v.path) for v in result.violations] == [(ErrorKind.FORMAT, "entries[0].period")]
    assert "expected 2021-06-21T00:00:00.000Z" in result.violations[0].message
