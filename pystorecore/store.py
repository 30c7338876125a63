import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable, Generic, List, Optional

import reactivex
from reactivex import Observable, operators as ops
from reactivex.disposable import Disposable

from .actions import Action, ActionTypes, is_plain_object
from .config import StoreOptions
from .errors import (
    ConfigurationError,
    InvalidActionError,
    InvalidEnhancerError,
    InvalidListenerError,
    InvalidObserverError,
    InvalidReducerError,
    MissingActionTypeError,
    ReentrantDispatchError,
    ReentrantReadError,
    ReentrantSubscribeError,
    ReentrantUnsubscribeError,
)
from .types import Listener, Reducer, S, StateSelector, Unsubscribe

logger = logging.getLogger(__name__)

_PRIMITIVES = (str, bytes, int, float, bool)


class Store(Generic[S]):
    """
    狀態容器，持有唯一的可變狀態，只能透過 reducer 經由 dispatch 改變。
    每次 dispatch 後同步通知所有訂閱者。

    dispatch 是一個實例屬性，初始為核心的 dispatch，
    增強器（例如 apply_middleware）可以將其替換為包裹後的版本。
    """

    def __init__(self, reducer: Reducer, preloaded_state: Optional[S] = None):
        """
        建立一個 Store 實例，並立即分發內部的 INIT action。

        Args:
            reducer: 根 reducer。
            preloaded_state: 初始狀態，None 表示由 reducer 提供預設狀態。

        Raises:
            InvalidReducerError: reducer 不可呼叫。
        """
        if not callable(reducer):
            raise InvalidReducerError(reducer)

        # 當前的 reducer 與狀態
        self._current_reducer = reducer
        self._current_state = preloaded_state
        # 監聽器雙緩衝：通知時迭代 _current_listeners，訂閱/取消訂閱修改 _next_listeners
        self._current_listeners: List[Listener] = []
        self._next_listeners = self._current_listeners
        # 重入保護旗標
        self._is_dispatching = False
        # 設定原始的 dispatch 方法，增強器可以替換
        self.dispatch = self._dispatch_core

        # 讓每個 reducer 返回其初始狀態，填充初始狀態樹
        self._dispatch_core(Action(ActionTypes.INIT))

    def _ensure_can_mutate_next_listeners(self):
        """
        在修改監聽列表前複製一份，確保正在進行的通知迭代不受影響。
        """
        if self._next_listeners is self._current_listeners:
            self._next_listeners = list(self._current_listeners)

    def get_state(self) -> S:
        """
        讀取當前狀態。

        Returns:
            當前狀態。

        Raises:
            ReentrantReadError: 在 reducer 執行期間呼叫。
        """
        if self._is_dispatching:
            raise ReentrantReadError()
        return self._current_state

    @property
    def state(self) -> S:
        """
        獲取當前狀態的快照。
        """
        return self.get_state()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        註冊一個在每次 dispatch 完成後被呼叫的監聽器。

        在通知過程中新增或移除的監聽器不影響本次通知，只從下一次 dispatch 開始生效。

        Args:
            listener: 無參數的回呼函數。

        Returns:
            取消訂閱的函數，重複呼叫不會有任何效果。

        Raises:
            InvalidListenerError: listener 不可呼叫。
            ReentrantSubscribeError: 在 reducer 執行期間呼叫。
        """
        if not callable(listener):
            raise InvalidListenerError(listener)

        if self._is_dispatching:
            raise ReentrantSubscribeError()

        is_subscribed = True

        self._ensure_can_mutate_next_listeners()
        self._next_listeners.append(listener)

        def unsubscribe() -> None:
            nonlocal is_subscribed
            # 已經移除過則直接返回
            if not is_subscribed:
                return

            if self._is_dispatching:
                raise ReentrantUnsubscribeError()

            is_subscribed = False

            self._ensure_can_mutate_next_listeners()
            self._next_listeners.remove(listener)

        return unsubscribe

    def _dispatch_core(self, action: Any) -> Any:
        """
        核心的 dispatch 方法，改變狀態的唯一途徑。

        Args:
            action: 要分發的 Action，必須是帶有 type 的 Mapping。

        Returns:
            傳入的 Action。

        Raises:
            InvalidActionError: action 不是 Mapping。
            MissingActionTypeError: action 缺少 type。
            ReentrantDispatchError: 在 reducer 執行期間呼叫。
        """
        if not is_plain_object(action):
            raise InvalidActionError(action)

        if action.get("type") is None:
            raise MissingActionTypeError(action)

        if self._is_dispatching:
            raise ReentrantDispatchError()

        try:
            self._is_dispatching = True
            self._current_state = self._current_reducer(self._current_state, action)
        finally:
            self._is_dispatching = False

        # 同步監聽列表快照，依註冊順序通知
        listeners = self._current_listeners = self._next_listeners
        for listener in listeners:
            listener()

        return action

    def replace_reducer(self, next_reducer: Reducer) -> None:
        """
        替換當前使用的 reducer，並分發 REPLACE action 讓新的 reducer 樹初始化其狀態。

        Args:
            next_reducer: 新的 reducer。

        Raises:
            InvalidReducerError: next_reducer 不可呼叫。
        """
        if not callable(next_reducer):
            raise InvalidReducerError(next_reducer, argument="next_reducer")

        self._current_reducer = next_reducer
        logger.debug("Reducer replaced with %r", next_reducer)
        self._dispatch_core(Action(ActionTypes.REPLACE))

    def observable(self) -> "StateObservable":
        """
        返回一個狀態變更的最小可觀察對象，供響應式函式庫互通使用。
        """
        return StateObservable(self)

    def select(self, selector: Optional[StateSelector] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        訂閱時立即發送當前的選擇結果，之後只在選擇結果的引用改變時發送。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分；None 時觀察整個狀態。

        Returns:
            一個 reactivex 可觀察對象，發送選定的狀態部分。
        """
        source = self.observable().to_rx()
        if selector is None:
            return source.pipe(ops.distinct_until_changed(comparer=lambda a, b: a is b))

        return source.pipe(
            ops.map(selector),
            # 只有當選擇結果變化時才發出
            ops.distinct_until_changed(comparer=lambda a, b: a is b),
        )


def _is_valid_observer(observer: Any) -> bool:
    if observer is None or isinstance(observer, _PRIMITIVES):
        return False
    # 裸函數不是觀察者物件
    if inspect.isfunction(observer) or inspect.ismethod(observer) or inspect.isbuiltin(observer):
        return False
    return True


def _observer_next(observer: Any) -> Optional[Callable[[Any], Any]]:
    if isinstance(observer, Mapping):
        return observer.get("on_next") or observer.get("next")
    return getattr(observer, "on_next", None) or getattr(observer, "next", None)


class StateSubscription:
    """
    StateObservable.subscribe 返回的訂閱物件。
    """

    def __init__(self, unsubscribe: Unsubscribe):
        self._unsubscribe = unsubscribe

    def unsubscribe(self) -> None:
        self._unsubscribe()

    # 與 reactivex 的 Disposable 介面相容
    dispose = unsubscribe


class StateObservable:
    """
    Store 狀態的最小可觀察對象。

    訂閱時立即推送一次當前狀態，之後在每次 dispatch 後推送，直到取消訂閱。
    """

    def __init__(self, store: Store):
        self._store = store

    def subscribe(self, observer: Any) -> StateSubscription:
        """
        訂閱狀態變更。

        Args:
            observer: 擁有 on_next（或 next）方法的物件。

        Returns:
            帶有 unsubscribe 方法的訂閱物件。

        Raises:
            InvalidObserverError: observer 不是物件。
        """
        if not _is_valid_observer(observer):
            raise InvalidObserverError(observer)

        store = self._store

        def observe_state() -> None:
            on_next = _observer_next(observer)
            if on_next is not None:
                on_next(store.get_state())

        observe_state()
        unsubscribe = store.subscribe(observe_state)
        return StateSubscription(unsubscribe)

    def to_rx(self) -> Observable:
        """
        轉換為 reactivex 的 Observable，以便使用 Rx 運算子。
        """
        store = self._store

        def on_subscribe(observer, scheduler=None):
            observer.on_next(store.get_state())
            unsubscribe = store.subscribe(lambda: observer.on_next(store.get_state()))
            return Disposable(unsubscribe)

        return reactivex.create(on_subscribe)


def create_store(reducer: Reducer, preloaded_state: Any = None, enhancer: Any = None,
                 *, options: Optional[StoreOptions] = None) -> Store:
    """
    創建一個新的 Store 實例。

    若第二個參數可呼叫且沒有第三個參數，則將其視為 enhancer。
    提供 enhancer 時，由 enhancer 完全接管 store 的建立。

    Args:
        reducer: 根 reducer，可以是 combine_reducers 的結果。
        preloaded_state: 初始狀態。
        enhancer: store 增強器，例如 apply_middleware(...) 的結果。
        options: 具名的 StoreOptions，不可與 preloaded_state、enhancer 同時提供。

    Returns:
        Store: 新創建的 Store 實例。

    Raises:
        ConfigurationError: 同時提供 options 與位置參數。
        InvalidEnhancerError: enhancer 不可呼叫。
        InvalidReducerError: reducer 不可呼叫。
    """
    if options is not None and (preloaded_state is not None or enhancer is not None):
        raise ConfigurationError(
            "Pass either options or preloaded_state/enhancer to create_store, not both.",
            component="create_store",
            config_key="options",
        )

    if options is None:
        options = StoreOptions.resolve(preloaded_state, enhancer)
    elif options.enhancer is not None and not callable(options.enhancer):
        raise InvalidEnhancerError(options.enhancer)

    if options.enhancer is not None:
        return options.enhancer(create_store)(reducer, options.preloaded_state)

    return Store(reducer, options.preloaded_state)
