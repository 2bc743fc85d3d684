from datetime import UTC
from flowdex.observability.metrics import (
    INDEX_BUILD_SECONDS,
    INDEX_BUILDS,
    INDEX_SKIPPED,
    INDEX_WORKFLOWS,
    MetricEvent,
    MetricRecorder,
    record_index_build,
)


def test_recorder_tracks_events_by_name() -> None:
    recorder = MetricRecorder()
    recorder.increment("catalog.index.builds", root="/a")
    recorder.increment("catalog.index.builds", root="/b")
    recorder.record(MetricEvent(name="other", value=3))

    assert len(recorder.events()) == 3
    builds = recorder.events("catalog.index.builds")
    assert [event.tags["root"] for event in builds] == ["/a", "/b"]
    assert builds[0].recorded_at.tzinfo is UTC


def test_summary_groups_by_tags() -> None:
    recorder = MetricRecorder()
    recorder.increment("hits", 2, route="search")
    recorder.increment("hits", 3, route="search")
    recorder.increment("hits", route="stats")
    recorder.increment("plain")

    assert recorder.summary() == {
        "hits": {"route=search": 5.0, "route=stats": 1.0},
        "plain": {"": 1.0},
    }


def test_record_index_build_emits_one_event_per_measure() -> None:
    recorder = MetricRecorder()

    record_index_build(
        recorder, root="/corpus", workflows=12, skipped=2, duration_seconds=0.5
    )

    summary = recorder.summary()
    assert summary[INDEX_BUILDS] == {"root=/corpus": 1.0}
    assert summary[INDEX_WORKFLOWS] == {"root=/corpus": 12.0}
    assert summary[INDEX_SKIPPED] == {"root=/corpus": 2.0}
    assert summary[INDEX_BUILD_SECONDS] == {"root=/corpus": 0.5}


def test_clear_drops_history() -> None:
    recorder = MetricRecorder()
    recorder.extend([MetricEvent(name="a", value=1), MetricEvent(name="b", value=2)])
    recorder.clear()
    assert recorder.events() == []
