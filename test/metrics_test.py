import os

import pytest

from themepark.metrics_recorder import FIELDNAMES, MetricsRecorder


@pytest.fixture
def metrics(tmp_path, clock):
    recorder = MetricsRecorder(out_dir=str(tmp_path), clock=clock)
    yield recorder
    recorder.close()


def test_header_written_once(tmp_path, clock):
    MetricsRecorder(out_dir=str(tmp_path), clock=clock).close()
    second = MetricsRecorder(out_dir=str(tmp_path), clock=clock)
    second.record_board("R1", "Coaster", 3, 1)
    second.close()

    with open(os.path.join(str(tmp_path), "metrics.csv"), encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert lines[0] == ",".join(FIELDNAMES)
    assert len(lines) == 2


def test_events_are_timestamped_by_the_clock(metrics, clock):
    metrics.record_queue_join("R1", "Coaster", "VIS-1", 1)
    clock.advance_minutes(5)
    metrics.record_queue_reject("R1", "Coaster", "VIS-2", "age=9")

    join, reject = metrics.read_events()
    assert join["time"] == "2026-03-01 09:00:00"
    assert reject["time"] == "2026-03-01 09:05:00"
    assert reject["reason"] == "age=9"


def test_filter_by_event(metrics):
    metrics.record_booking("B1", "R1", "VIS-1")
    metrics.record_cancel("B1", "R1", "VIS-1")
    cancels = metrics.read_events("booking_cancel")
    assert len(cancels) == 1
    assert cancels[0]["booking_id"] == "B1"


def test_ridership_by_ride(metrics):
    metrics.record_board("R1", "Coaster", 4, 1)
    metrics.record_board("R2", "Ship", 5, 1)
    metrics.record_board("R1", "Coaster", 2, 2)
    assert metrics.ridership_by_ride() == {"Coaster": [4, 2], "Ship": [5]}


def test_graph_is_written(metrics, tmp_path):
    metrics.record_board("R1", "Coaster", 4, 1)
    metrics.record_board("R1", "Coaster", 1, 2)
    path = metrics.generate_ridership_graph()
    assert path == os.path.join(str(tmp_path), "ridership_graph.png")
    assert os.path.getsize(path) > 0


def test_graph_without_data(metrics, caplog):
    assert metrics.generate_ridership_graph() is None
    metrics.record_board("R1", "Coaster", 4, 1)
    assert metrics.generate_ridership_graph(include_rides=["Ship"]) is None
    assert "No ridership data" in caplog.text


def test_close_twice(metrics):
    metrics.close()
    metrics.close()
