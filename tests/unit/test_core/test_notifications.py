import pytest
from core.notifications import NotificationCenter
from core.sample_data import load_notifications
from core.store import DatasetStatus


@pytest.fixture
def center():
    center = NotificationCenter()
    center.populate(load_notifications())
    return center


def test_starts_absent():
    center = NotificationCenter()
    assert center.status == DatasetStatus.ABSENT
    assert center.notifications == []
    assert center.unread_count == 0


def test_populate_keeps_order(center):
    assert [n.id for n in center.notifications] == [1, 2, 3]
    assert center.unread_count == 2


def test_populate_copies_seed():
    seed = load_notifications()
    center = NotificationCenter()
    center.populate(seed)
    center.acknowledge(1)
    assert seed[0].read is False


def test_acknowledge_one(center):
    assert center.acknowledge(1) is True
    assert center.unread_count == 1
    flags = {n.id: n.read for n in center.notifications}
    assert flags == {1: True, 2: False, 3: True}


def test_acknowledge_already_read(center):
    assert center.acknowledge(3) is False
    assert center.unread_count == 2


def test_acknowledge_unknown_id(center):
    before = center.notifications
    assert center.acknowledge(99) is False
    assert center.notifications == before


def test_returned_list_is_a_copy(center):
    center.notifications[0].read = True
    assert center.unread_count == 2


def test_acknowledge_all(center):
    assert center.acknowledge_all() == 2
    assert center.unread_count == 0
    assert center.acknowledge_all() == 0


def test_mark_failed():
    center = NotificationCenter()
    center.mark_failed("notifications: offline")
    assert center.status == DatasetStatus.FAILED
    assert center.error == "notifications: offline"


def test_failure_after_arrival_ignored(center):
    center.mark_failed("late error")
    assert center.status == DatasetStatus.ARRIVED
    assert center.error is None
