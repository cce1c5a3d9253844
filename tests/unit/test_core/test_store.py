import pytest
from core.store import ABSENT, DatasetKind, DatasetStatus, DatasetStore, Readiness


@pytest.fixture
def store():
    return DatasetStore()


@pytest.mark.parametrize("kind", list(DatasetKind))
def test_every_kind_starts_absent(store, kind):
    assert store.get(kind) is ABSENT
    assert store.status(kind) == DatasetStatus.ABSENT
    assert not store.get(kind)


def test_set_returns_exact_value(store):
    samples = [{"date": "2023-01-01", "value": 0.65}]
    store.set(DatasetKind.NDVI, samples)
    assert store.get(DatasetKind.NDVI) is samples
    assert store.status(DatasetKind.NDVI) == DatasetStatus.ARRIVED


def test_set_overwrites_without_merging(store):
    store.set(DatasetKind.MARKET, [1, 2, 3])
    store.set(DatasetKind.MARKET, [4])
    assert store.get(DatasetKind.MARKET) == [4]
    assert store.write_count(DatasetKind.MARKET) == 2


def test_out_of_range_values_accepted(store):
    store.set(DatasetKind.NDVI, [{"value": 1.7}])
    assert store.get(DatasetKind.NDVI) == [{"value": 1.7}]


def test_failure_is_distinct_from_absent(store):
    store.fail(DatasetKind.WEATHER, "timeout")
    assert store.status(DatasetKind.WEATHER) == DatasetStatus.FAILED
    assert store.get(DatasetKind.WEATHER) is ABSENT
    assert store.error(DatasetKind.WEATHER) == "timeout"
    assert store.is_terminal(DatasetKind.WEATHER)


def test_later_value_replaces_failure(store):
    store.fail(DatasetKind.SOIL, "timeout")
    store.set(DatasetKind.SOIL, ["ph"])
    assert store.entry(DatasetKind.SOIL) == (DatasetStatus.ARRIVED, ["ph"], None)


def test_failure_does_not_erase_value(store):
    store.set(DatasetKind.SOIL, ["ph"])
    store.fail(DatasetKind.SOIL, "timeout")
    assert store.status(DatasetKind.SOIL) == DatasetStatus.ARRIVED
    assert store.get(DatasetKind.SOIL) == ["ph"]


def test_updater_writes_only_its_kind(store):
    update_farm = store.updater(DatasetKind.FARM)
    update_farm("farm")
    assert store.get(DatasetKind.FARM) == "farm"
    assert store.get(DatasetKind.NDVI) is ABSENT


def test_listeners_notified_after_write(store):
    seen = []
    unsubscribe = store.subscribe(lambda kind, value: seen.append((kind, store.get(kind))))
    store.set(DatasetKind.FARM, "a")
    unsubscribe()
    store.set(DatasetKind.FARM, "b")
    assert seen == [(DatasetKind.FARM, "a")]


def test_readiness_transitions_once(store):
    assert store.is_loading
    assert store.readiness == Readiness.LOADING
    assert store.mark_ready() is True
    assert store.readiness == Readiness.READY
    assert store.mark_ready(with_errors=True) is False
    assert store.readiness == Readiness.READY
    assert not store.is_loading


def test_ready_with_errors(store):
    store.mark_ready(with_errors=True)
    assert store.readiness == Readiness.READY_WITH_ERRORS
    assert not store.is_loading


def test_snapshot(store):
    store.set(DatasetKind.FARM, "farm")
    snap = store.snapshot()
    assert snap[DatasetKind.FARM] == DatasetStatus.ARRIVED
    assert snap[DatasetKind.NDVI] == DatasetStatus.ABSENT


def test_set_succeeds_when_listener_raises(store):
    seen = []

    def broken(kind, value):
        raise AttributeError("'dict' object has no attribute 'coordinates'")

    store.subscribe(broken)
    store.subscribe(lambda kind, value: seen.append(value))
    store.set(DatasetKind.FARM, {"name": "dict farm"})

    assert store.get(DatasetKind.FARM) == {"name": "dict farm"}
    assert seen == [{"name": "dict farm"}]
