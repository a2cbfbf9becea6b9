"""
Unit tests for the shape-keyed guideline store.
"""

import pytest

from brand_export.core.models import Axis, Guideline
from brand_export.errors import DragInProgressError, GuidelineLockedError
from brand_export.guidelines import LOGO_SHAPES, GuidelineStore, shape_key


@pytest.fixture
def lines():
    return (
        Guideline("vertical-1", Axis.VERTICAL, 40, "X1"),
        Guideline("horizontal-1", Axis.HORIZONTAL, 120.4, "Y1"),
    )


def test_shape_keys_for_logo_variants():
    assert [shape_key(s) for s in LOGO_SHAPES] == ["square-logo", "rounded-logo", "circle-logo"]


def test_unknown_key_is_empty(store):
    assert store.get("square-logo") == ()


def test_publish_replaces_and_notifies(store, lines):
    events = []
    store.subscribe(lambda key, value: events.append((key, value)))

    store.publish("square-logo", lines)

    assert store.get("square-logo") == lines
    assert events == [("square-logo", lines)]


def test_unsubscribe_stops_notifications(store, lines):
    events = []
    unsubscribe = store.subscribe(lambda key, value: events.append(key))
    unsubscribe()
    unsubscribe()

    store.publish("square-logo", lines)

    assert events == []


def test_committed_snapshot_excludes_temp(store, lines):
    temp = Guideline(Guideline.temp_id(Axis.VERTICAL), Axis.VERTICAL, 8, "X2")
    store.publish("square-logo", lines + (temp,))

    assert store.get("square-logo", include_temp=False) == lines


class TestExportLock:
    def test_lock_yields_committed_snapshot_and_blocks_publish(self, store, lines):
        store.publish("square-logo", lines)

        with store.export_lock("square-logo", "circle-logo") as snapshot:
            assert snapshot == {"square-logo": lines, "circle-logo": ()}
            assert store.is_locked("square-logo")
            with pytest.raises(GuidelineLockedError):
                store.publish("square-logo", ())
            # Unrelated keys stay writable
            store.publish("rounded-logo", lines)

        assert not store.is_locked("square-logo")
        store.publish("square-logo", ())

    def test_nested_locks_release_when_outermost_exits(self, store):
        with store.export_lock("square-logo"):
            with store.export_lock("square-logo"):
                pass
            assert store.is_locked("square-logo")
        assert not store.is_locked("square-logo")

    def test_lock_released_on_error(self, store):
        with pytest.raises(RuntimeError):
            with store.export_lock("square-logo"):
                raise RuntimeError("boom")
        assert not store.is_locked("square-logo")


def test_single_drag_slot(store):
    store.claim_drag("square-logo")

    with pytest.raises(DragInProgressError):
        store.claim_drag("circle-logo")

    store.release_drag("circle-logo")  # not the owner, no effect
    assert store.drag_owner == "square-logo"
    store.release_drag("square-logo")
    assert store.drag_owner is None


def test_dict_round_trip_keeps_committed_only(store, lines):
    temp = Guideline(Guideline.temp_id(Axis.VERTICAL), Axis.VERTICAL, 8, "X2")
    store.publish("square-logo", lines + (temp,))

    data = store.to_dict()
    restored = GuidelineStore.from_dict(data)

    assert data["square-logo"][0] == {
        "id": "vertical-1", "type": "vertical", "position": 40, "name": "X1",
    }
    assert restored.get("square-logo") == lines
