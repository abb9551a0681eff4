import asyncio
import random

import pytest

from tripboard.errors import DragSessionError, ItemNotFoundError, RejectionError, TransportError
from tripboard.models.drag import DragStatus, HoverTarget
from tripboard.services.commit_coordinator import CommitCoordinator
from tripboard.services.drag_session import DragSessionController
from tripboard.services.notifier import NoticeCenter
from tripboard.services.schedule_store import ScheduleStore

from mock_trip_api import FakeTripApi, build_schedule


def make_controller(layout):
    store = ScheduleStore(build_schedule(layout))
    api = FakeTripApi()
    notices = NoticeCenter()
    controller = DragSessionController(store, CommitCoordinator("trip_1", store, api, notices))
    return controller, store, api, notices


def assert_intent_reproduces(arrangement, intent):
    """Splicing the item between its anchors must give the displayed order of the target day."""
    target = list(arrangement[intent.targetDayId])
    index = target.index(intent.itemId)
    assert (target[index - 1] if index > 0 else None) == intent.prevItemId
    assert (target[index + 1] if index < len(target) - 1 else None) == intent.nextItemId


def test_start_hover_end_commits_last_intent_only():
    controller, store, api, notices = make_controller({"d1": ["A", "B", "C"], "d2": ["X", "Y"]})

    controller.start("A")
    assert controller.active
    controller.hover(HoverTarget.item("Y"))
    controller.hover(HoverTarget.item("X"))
    controller.hover(HoverTarget.end_of_list("d2"))
    outcome = asyncio.run(controller.end())

    assert outcome.status == DragStatus.COMMITTED
    assert not controller.active
    assert api.calls_to("move_item") == [("trip_1", "A", "d2", "Y", None)]
    assert store.current.arrangement() == {"d1": ("B", "C"), "d2": ("X", "Y", "A")}
    assert notices.pending() == []


def test_release_without_target_restores_snapshot_and_skips_remote():
    controller, store, api, _ = make_controller({"d1": ["A", "B"]})
    before = store.current

    controller.start("A")
    controller.hover(HoverTarget.item("A"))
    outcome = asyncio.run(controller.end())

    assert outcome.status == DragStatus.CANCELLED
    assert store.current is before
    assert api.calls == []


def test_failed_commit_rolls_back_to_drag_start_snapshot():
    controller, store, api, notices = make_controller({"d1": ["A", "B", "C"], "d2": ["X"], "d3": []})
    snapshot = store.current
    api.fail("move_item", RejectionError("Item is locked by another editor", code=500))

    controller.start("B")
    controller.hover(HoverTarget.item("X"))
    controller.hover(HoverTarget.empty_day("d3"))
    controller.hover(HoverTarget.item("A"))
    assert store.current != snapshot

    outcome = asyncio.run(controller.end())

    assert outcome.status == DragStatus.ROLLED_BACK
    assert isinstance(outcome.error, RejectionError)
    assert store.current == snapshot
    assert [n.message for n in notices.pending()] == ["Item is locked by another editor"]


def test_transport_failure_notice():
    controller, store, api, notices = make_controller({"d1": ["A", "B"]})
    api.fail("move_item", TransportError("connection refused"))

    controller.start("A")
    controller.hover(HoverTarget.item("B"))
    asyncio.run(controller.end())

    assert store.current.arrangement() == {"d1": ("A", "B")}
    assert notices.pending()[0].message == "Network error: connection refused"
    assert notices.pending()[0].severity == "error"


def test_cancel_restores_snapshot():
    controller, store, api, _ = make_controller({"d1": ["A", "B"], "d2": []})
    before = store.current

    controller.start("A")
    controller.hover(HoverTarget.empty_day("d2"))
    outcome = controller.cancel()

    assert outcome.status == DragStatus.CANCELLED
    assert store.current is before
    assert not store.locked
    assert api.calls == []


def test_invalid_transitions():
    controller, store, _, _ = make_controller({"d1": ["A", "B"]})

    with pytest.raises(ItemNotFoundError):
        controller.start("ghost")
    assert not controller.active

    controller.start("A")
    with pytest.raises(DragSessionError):
        controller.start("B")
    assert controller.session.item_id == "A"
    controller.cancel()

    with pytest.raises(DragSessionError):
        controller.cancel()
    with pytest.raises(DragSessionError):
        asyncio.run(controller.end())
    # hover while idle is ignored
    assert controller.hover(HoverTarget.item("B")) is None
    assert store.current.arrangement() == {"d1": ("A", "B")}


def test_store_is_locked_for_the_session_only():
    controller, store, _, _ = make_controller({"d1": ["A", "B"]})
    controller.start("A")
    assert store.locked
    with pytest.raises(DragSessionError):
        store.refresh(build_schedule({"d1": ["A"]}))
    controller.cancel()
    assert not store.locked


def test_new_session_clears_previous_intent():
    controller, _, api, _ = make_controller({"d1": ["A", "B", "C"]})
    controller.start("A")
    controller.hover(HoverTarget.item("C"))
    asyncio.run(controller.end())

    session = controller.start("B")
    assert session.intent is None
    outcome = asyncio.run(controller.end())
    assert outcome.status == DragStatus.CANCELLED
    assert len(api.calls_to("move_item")) == 1


def test_random_hover_sequences_keep_anchor_and_rollback_properties():
    layout = {"d1": ["A", "B", "C", "D"], "d2": ["X", "Y"], "d3": [], "d4": ["Q"]}
    rng = random.Random(20251018)
    targets = (
        [HoverTarget.item(item_id) for ids in layout.values() for item_id in ids]
        + [HoverTarget.empty_day(day_id) for day_id in layout]
        + [HoverTarget.end_of_list(day_id) for day_id in layout]
    )

    for round_number in range(40):
        controller, store, api, _ = make_controller(layout)
        snapshot = store.current
        dragged = rng.choice(layout["d1"] + layout["d2"])
        fail = round_number % 2 == 1
        if fail:
            api.fail("move_item", TransportError("offline"))

        controller.start(dragged)
        for _ in range(rng.randint(1, 12)):
            controller.hover(rng.choice(targets))
        displayed = store.current.arrangement()
        intent = controller.session.intent
        outcome = asyncio.run(controller.end())

        if intent is None:
            assert api.calls == []
            assert store.current == snapshot
            continue

        assert_intent_reproduces(displayed, intent)
        assert api.calls_to("move_item") == [
            ("trip_1", intent.itemId, intent.targetDayId, intent.prevItemId, intent.nextItemId)
        ]
        if fail:
            assert outcome.status == DragStatus.ROLLED_BACK
            assert store.current == snapshot
        else:
            assert outcome.status == DragStatus.COMMITTED
            assert store.current.arrangement() == displayed
