"""
Tests for the shared defect snapshot.
"""
from src.potholes.models.defect import Coordinates, DefectReport, RoadPosition
from src.potholes.services.snapshot import DefectSnapshot


def make_report(defect_id: int) -> DefectReport:
    return DefectReport(
        id=defect_id,
        coordinates=Coordinates(latitude=47.5, longitude=19.0),
        location_description=f"Budapest, Váci út {defect_id}",
        road_position=RoadPosition.CENTER,
    )


def test_publish_replaces_reports():
    snapshot = DefectSnapshot()
    snapshot.publish([make_report(1), make_report(2)])
    snapshot.publish([make_report(3)])

    assert [r.id for r in snapshot.reports] == [3]
    assert snapshot.published_at is not None


def test_subscribers_receive_each_publish():
    snapshot = DefectSnapshot()
    received = []
    snapshot.subscribe(lambda reports: received.append([r.id for r in reports]))

    snapshot.publish([make_report(1)])
    snapshot.publish([make_report(1), make_report(2)])

    assert received == [[1], [1, 2]]


def test_unsubscribe():
    snapshot = DefectSnapshot()
    received = []
    unsubscribe = snapshot.subscribe(received.append)

    unsubscribe()
    snapshot.publish([make_report(1)])

    assert received == []
