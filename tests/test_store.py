import pytest

from dashboard.models import SelectionState
from dashboard.store import SelectionStore


@pytest.fixture
def store():
    return SelectionStore()


def test_defaults(store):
    assert store.get_state() == SelectionState(None, None, "full")


def test_subscribe_calls_listener_immediately(store):
    calls = []
    store.subscribe(calls.append)
    assert calls == [SelectionState()]


def test_unchanged_patch_does_not_notify(store):
    calls = []
    store.subscribe(calls.append)
    store.set_state(selected_year=None)
    assert len(calls) == 1


def test_patch_merges_fields(store):
    calls = []
    store.subscribe(calls.append)
    store.set_state(selected_country_iso3="DEU")
    assert calls[-1] == SelectionState(selected_country_iso3="DEU", selected_year=None, indicator_window="full")
    store.set_state(selected_year=2015)
    assert store.get_state() == SelectionState("DEU", 2015, "full")


def test_any_field_change_notifies(store):
    calls = []
    store.subscribe(calls.append)
    store.set_state(indicator_window="20y")
    assert len(calls) == 2
    assert calls[-1].indicator_window == "20y"


def test_listeners_called_in_subscription_order(store):
    order = []
    store.subscribe(lambda s: order.append("a"))
    store.subscribe(lambda s: order.append("b"))
    order.clear()
    store.set_state(selected_year=2000)
    assert order == ["a", "b"]


def test_unsubscribe_stops_notifications(store):
    calls = []
    unsubscribe = store.subscribe(calls.append)
    unsubscribe()
    unsubscribe()
    store.set_state(selected_year=2000)
    assert len(calls) == 1


def test_same_listener_registered_once(store):
    calls = []
    store.subscribe(calls.append)
    store.subscribe(calls.append)
    calls.clear()
    store.set_state(selected_year=2000)
    assert len(calls) == 1


def test_unknown_field_rejected(store):
    with pytest.raises(TypeError):
        store.set_state(selectedYear=2000)


def test_invalid_window_rejected(store):
    with pytest.raises(ValueError):
        store.set_state(indicator_window="10y")


def test_nested_set_state_completes_before_outer_loop(store):
    seen = []

    def clamp_year(state):
        seen.append(("clamp", state.selected_year))
        if state.selected_year is not None and state.selected_year > 2020:
            store.set_state(selected_year=2020)

    store.subscribe(clamp_year)
    store.subscribe(lambda state: seen.append(("view", state.selected_year)))
    seen.clear()

    store.set_state(selected_year=2030)
    assert store.get_state().selected_year == 2020
    assert seen == [
        ("clamp", 2030),
        ("clamp", 2020),
        ("view", 2020),
        ("view", 2020),
    ]


def test_reset_restores_defaults(store):
    store.set_state(selected_country_iso3="DEU", selected_year=2001, indicator_window="35y")
    calls = []
    store.subscribe(calls.append)
    store.reset()
    assert store.get_state() == SelectionState()
    assert len(calls) == 2
