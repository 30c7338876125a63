"""Tests for Store and create_store."""

import pytest

from pystorecore import (
    Action,
    ActionError,
    ActionTypes,
    ConfigurationError,
    InvalidActionError,
    InvalidEnhancerError,
    InvalidListenerError,
    InvalidReducerError,
    MissingActionTypeError,
    ReentrantDispatchError,
    ReentrantReadError,
    ReentrantSubscribeError,
    ReentrantUnsubscribeError,
    Store,
    StoreOptions,
    combine_reducers,
    create_store,
)

from sample_reducers import count, todos


class TestCreateStore:
    def test_initial_state_from_reducer(self):
        store = create_store(count)
        assert store.get_state() == 0

    def test_preloaded_state(self):
        store = create_store(count, 5)
        assert store.get_state() == 5

    def test_init_action_dispatched_once(self):
        seen = []

        def reducer(state=None, action=None):
            seen.append(action["type"])
            return state or {}

        create_store(reducer)
        assert seen == [ActionTypes.INIT]

    def test_rejects_non_callable_reducer(self):
        with pytest.raises(InvalidReducerError):
            create_store({"not": "a function"})

    def test_rejects_non_callable_enhancer(self):
        with pytest.raises(InvalidEnhancerError):
            create_store(count, 0, "enhancer")

    def test_enhancer_as_second_argument(self):
        calls = []

        def enhancer(create):
            def enhanced(reducer, preloaded_state):
                calls.append(preloaded_state)
                return create(reducer, preloaded_state)
            return enhanced

        store = create_store(count, enhancer)
        assert calls == [None]
        assert store.get_state() == 0

    def test_enhancer_owns_creation(self):
        def enhancer(create):
            def enhanced(reducer, preloaded_state):
                return create(reducer, preloaded_state + 10)
            return enhanced

        store = create_store(count, 1, enhancer)
        assert store.get_state() == 11

    def test_explicit_options(self):
        store = create_store(count, options=StoreOptions(preloaded_state=3))
        assert store.get_state() == 3

    def test_explicit_options_reject_bad_enhancer(self):
        with pytest.raises(InvalidEnhancerError):
            create_store(count, options=StoreOptions(enhancer=42))

    def test_options_with_positional_preloaded_state(self):
        with pytest.raises(ConfigurationError) as info:
            create_store(count, 5, options=StoreOptions(preloaded_state=3))
        assert info.value.config_key == "options"

    def test_options_with_positional_enhancer(self):
        def enhancer(create):
            return create

        with pytest.raises(ConfigurationError):
            create_store(count, None, enhancer, options=StoreOptions())

    def test_stores_are_independent(self):
        a = create_store(count)
        b = create_store(count)
        a.dispatch({"type": "INC"})
        assert a.get_state() == 1
        assert b.get_state() == 0


class TestDispatch:
    def test_counter_scenario(self):
        store = create_store(count)
        assert store.get_state() == 0
        store.dispatch({"type": "INC"})
        assert store.get_state() == 1
        before = store.get_state()
        store.dispatch({"type": "NOOP"})
        assert store.get_state() == 1
        assert store.get_state() is before

    def test_returns_action(self):
        store = create_store(count)
        action = {"type": "INC"}
        assert store.dispatch(action) is action

    def test_accepts_action_record(self):
        store = create_store(todos)
        store.dispatch(Action("ADD_TODO", text="write tests"))
        assert store.state == ("write tests",)

    def test_unknown_action_keeps_reference(self):
        reducer = combine_reducers({"todos": todos})
        store = create_store(reducer)
        before = store.get_state()
        store.dispatch({"type": "SOMETHING_ELSE"})
        assert store.get_state() is before

    @pytest.mark.parametrize("action", [None, 1, "INC", ["INC"], object()])
    def test_rejects_non_mapping_action(self, action):
        store = create_store(count)
        with pytest.raises(InvalidActionError):
            store.dispatch(action)

    def test_rejects_missing_type(self):
        store = create_store(count)
        with pytest.raises(MissingActionTypeError):
            store.dispatch({"payload": 1})
        with pytest.raises(MissingActionTypeError):
            store.dispatch({"type": None})

    def test_bad_action_is_recoverable(self):
        store = create_store(count)
        try:
            store.dispatch("INC")
        except ActionError:
            pass
        store.dispatch({"type": "INC"})
        assert store.get_state() == 1

    def test_falsy_type_is_valid(self):
        seen = []

        def reducer(state=None, action=None):
            seen.append(action["type"])
            return 0

        store = create_store(reducer)
        store.dispatch({"type": 0})
        store.dispatch({"type": ""})
        assert seen[1:] == [0, ""]

    def test_reducer_error_keeps_state_and_releases_guard(self):
        def reducer(state=None, action=None):
            if action["type"] == "BOOM":
                raise RuntimeError("boom")
            return count(state, action)

        store = create_store(reducer)
        store.dispatch({"type": "INC"})
        with pytest.raises(RuntimeError, match="boom"):
            store.dispatch({"type": "BOOM"})
        assert store.get_state() == 1
        store.dispatch({"type": "INC"})
        assert store.get_state() == 2

    def test_listeners_not_called_when_reducer_raises(self):
        def reducer(state=None, action=None):
            if action["type"] == "BOOM":
                raise RuntimeError("boom")
            return 0

        store = create_store(reducer)
        calls = []
        store.subscribe(lambda: calls.append(1))
        with pytest.raises(RuntimeError):
            store.dispatch({"type": "BOOM"})
        assert calls == []


class TestReentrancy:
    def _store_with(self, inner):
        holder = {}

        def reducer(state=None, action=None):
            if action["type"] == "REENTER":
                inner(holder["store"])
            return count(state, action)

        holder["store"] = create_store(reducer)
        return holder["store"]

    def test_dispatch_from_reducer(self):
        errors = []

        def inner(store):
            try:
                store.dispatch({"type": "INC"})
            except ReentrantDispatchError as err:
                errors.append(err)

        store = self._store_with(inner)
        store.dispatch({"type": "REENTER"})
        assert len(errors) == 1
        assert store.get_state() == 0
        store.dispatch({"type": "INC"})
        assert store.get_state() == 1

    def test_outer_dispatch_uses_reducer_result(self):
        holder = {}

        def reducer(state=None, action=None):
            if state is None:
                state = 0
            if action["type"] == "REENTER":
                try:
                    holder["store"].dispatch({"type": "INC"})
                except ReentrantDispatchError:
                    return state + 100
            return state

        holder["store"] = create_store(reducer)
        holder["store"].dispatch({"type": "REENTER"})
        assert holder["store"].get_state() == 100

    def test_uncaught_reentrant_dispatch_propagates(self):
        store = self._store_with(lambda s: s.dispatch({"type": "INC"}))
        with pytest.raises(ReentrantDispatchError):
            store.dispatch({"type": "REENTER"})
        store.dispatch({"type": "INC"})
        assert store.get_state() == 1

    def test_get_state_from_reducer(self):
        store = self._store_with(lambda s: s.get_state())
        with pytest.raises(ReentrantReadError):
            store.dispatch({"type": "REENTER"})

    def test_subscribe_from_reducer(self):
        store = self._store_with(lambda s: s.subscribe(lambda: None))
        with pytest.raises(ReentrantSubscribeError):
            store.dispatch({"type": "REENTER"})

    def test_unsubscribe_from_reducer(self):
        holder = {}

        def reducer(state=None, action=None):
            if action["type"] == "REENTER":
                holder["unsubscribe"]()
            return count(state, action)

        store = create_store(reducer)
        holder["unsubscribe"] = store.subscribe(lambda: None)
        with pytest.raises(ReentrantUnsubscribeError):
            store.dispatch({"type": "REENTER"})

    def test_listener_may_dispatch(self):
        store = create_store(count)
        log = []

        def listener():
            log.append(store.get_state())
            if store.get_state() == 1:
                store.dispatch({"type": "INC"})

        store.subscribe(listener)
        store.dispatch({"type": "INC"})
        assert log == [1, 2]
        assert store.get_state() == 2


class TestSubscribe:
    def test_rejects_non_callable(self):
        store = create_store(count)
        with pytest.raises(InvalidListenerError):
            store.subscribe("listener")

    def test_listeners_called_in_order(self):
        store = create_store(count)
        log = []
        store.subscribe(lambda: log.append("a"))
        store.subscribe(lambda: log.append("b"))
        store.dispatch({"type": "INC"})
        assert log == ["a", "b"]

    def test_listener_called_without_arguments(self):
        store = create_store(count)
        received = []
        store.subscribe(lambda *args: received.append(args))
        store.dispatch({"type": "INC"})
        assert received == [()]

    def test_unsubscribe(self):
        store = create_store(count)
        calls = []
        unsubscribe = store.subscribe(lambda: calls.append(1))
        store.dispatch({"type": "INC"})
        unsubscribe()
        store.dispatch({"type": "INC"})
        assert calls == [1]

    def test_unsubscribe_is_idempotent(self):
        store = create_store(count)
        calls = []

        def listener():
            calls.append(1)

        first = store.subscribe(listener)
        store.subscribe(listener)
        first()
        first()
        store.dispatch({"type": "INC"})
        assert calls == [1]

    def test_snapshot_isolation_on_unsubscribe(self):
        store = create_store(count)
        log = []
        handles = {}

        def l1():
            log.append("L1")
            handles["l2"]()

        def l2():
            log.append("L2")

        store.subscribe(l1)
        handles["l2"] = store.subscribe(l2)

        store.dispatch({"type": "INC"})
        assert log == ["L1", "L2"]
        store.dispatch({"type": "INC"})
        assert log == ["L1", "L2", "L1"]

    def test_snapshot_isolation_on_subscribe(self):
        store = create_store(count)
        log = []

        def late():
            log.append("late")

        def l1():
            log.append("L1")
            if len(log) == 1:
                store.subscribe(late)

        store.subscribe(l1)
        store.dispatch({"type": "INC"})
        assert log == ["L1"]
        store.dispatch({"type": "INC"})
        assert log == ["L1", "L1", "late"]

    def test_unsubscribe_all_during_notification(self):
        store = create_store(count)
        log = []
        handles = []

        def make(name):
            def listener():
                log.append(name)
                for unsubscribe in handles:
                    unsubscribe()
            return listener

        handles.append(store.subscribe(make("a")))
        handles.append(store.subscribe(make("b")))
        handles.append(store.subscribe(make("c")))
        store.dispatch({"type": "INC"})
        assert log == ["a", "b", "c"]
        store.dispatch({"type": "INC"})
        assert log == ["a", "b", "c"]


class TestReplaceReducer:
    def test_replace_keeps_state(self):
        store = create_store(count)
        store.dispatch({"type": "INC"})

        def double(state=None, action=None):
            if state is None:
                state = 0
            if action["type"] == "INC":
                return state + 2
            return state

        store.replace_reducer(double)
        assert store.get_state() == 1
        store.dispatch({"type": "INC"})
        assert store.get_state() == 3

    def test_replace_dispatches_replace_action(self):
        store = create_store(count)
        seen = []

        def reducer(state=None, action=None):
            seen.append(action["type"])
            return state

        store.replace_reducer(reducer)
        assert seen == [ActionTypes.REPLACE]

    def test_replace_notifies_listeners(self):
        store = create_store(count)
        calls = []
        store.subscribe(lambda: calls.append(1))
        store.replace_reducer(count)
        assert calls == [1]

    def test_replace_with_combined_reducer_adds_branch(self):
        store = create_store(combine_reducers({"count": count}))
        store.dispatch({"type": "INC"})
        store.replace_reducer(combine_reducers({"count": count, "todos": todos}))
        assert store.get_state() == {"count": 1, "todos": ()}

    def test_rejects_non_callable(self):
        store = create_store(count)
        with pytest.raises(InvalidReducerError):
            store.replace_reducer(None)


class TestStoreClass:
    def test_direct_construction(self):
        store = Store(count, 7)
        assert store.get_state() == 7

    def test_direct_construction_rejects_bad_reducer(self):
        with pytest.raises(InvalidReducerError):
            Store(None)
