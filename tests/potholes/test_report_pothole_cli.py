"""
Tests for the report_pothole CLI script.
"""
import io
import json

import pytest

from scripts.report_pothole import main, parse_args
from src.potholes.ingestion.workflow import IngestionWorkflow


@pytest.fixture
def workflow(store, geocoder):
    return IngestionWorkflow(store, geocoder)


def test_parse_address_defaults():
    args = parse_args(["address", "--street", "Váci út 12"])

    assert args.command == "address"
    assert args.city == "Budapest"
    assert args.road_position == "center"


def test_parse_rejects_unknown_road_position():
    with pytest.raises(SystemExit):
        parse_args(["address", "--street", "Váci út 12", "--road-position", "sidewalk"])


def test_address_then_repeat(workflow, capsys):
    assert main(["address", "--street", "Váci út 12"], workflow=workflow) == 0
    assert main(["address", "--street", "Váci út 12"], workflow=workflow) == 0

    out = capsys.readouterr().out
    assert "New pothole recorded" in out
    assert "#2" in out


def test_unknown_address_exit_code(workflow, capsys):
    assert main(["address", "--street", "Nincs ilyen utca 1"], workflow=workflow) == 1
    assert "could not be found" in capsys.readouterr().err


def test_tap_and_list(workflow, capsys):
    main([
        "tap", "--lat", "47.4986", "--lng", "19.0559",
        "--description", "Budapest, Andrássy út 1", "--road-position", "edge",
    ], workflow=workflow)
    capsys.readouterr()

    out = io.StringIO()
    assert main(["list"], workflow=workflow, out=out) == 0
    rows = json.loads(out.getvalue())

    assert len(rows) == 1
    assert rows[0]["location_description"] == "Budapest, Andrássy út 1"
    assert rows[0]["road_position"] == "edge"


def test_list_markers(workflow, capsys):
    main(["address", "--street", "Váci út 12"], workflow=workflow)
    capsys.readouterr()

    out = io.StringIO()
    main(["list", "--markers"], workflow=workflow, out=out)
    markers = json.loads(out.getvalue())

    assert markers[0]["tier"] == "low"


def test_unconfigured_store(monkeypatch, capsys, settings_factory):
    monkeypatch.setattr("scripts.report_pothole.settings", settings_factory(database_url=None))

    assert main(["list"]) == 1
    assert "not configured" in capsys.readouterr().err
