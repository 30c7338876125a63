"""
PyStoreCore 範例：展示函數式與物件式中介軟體的使用
"""

import logging
import time

from pystorecore import (
    BaseMiddleware,
    apply_middleware,
    create_action,
    create_reducer,
    create_store,
    on,
)

logger = logging.getLogger("middleware_example")

add = create_action("[Counter] Add", lambda amount: amount)
counter_reducer = create_reducer(0, on(add, lambda state, action: state + action.payload))


# ———— 函數式中介軟體：支援 dispatch 函數 (thunk) ————
def thunk_middleware(api):
    def middleware(next_dispatch):
        def dispatch(action):
            if callable(action):
                return action(api.dispatch, api.get_state)
            return next_dispatch(action)
        return dispatch
    return middleware


# ———— 物件式中介軟體：記錄每次 action 前後的 state ————
class LoggingMiddleware(BaseMiddleware):
    def on_next(self, action, prev_state):
        logger.info("dispatching %s, state before: %r", action["type"], prev_state)

    def on_complete(self, next_state, action):
        logger.info("state after %s: %r", action["type"], next_state)

    def on_error(self, error, action):
        logger.error("error in %s: %s", action["type"], error)


# ———— 物件式中介軟體：統計每次 dispatch 的耗時 ————
class TimingMiddleware(BaseMiddleware):
    def __init__(self):
        self.metrics = {}

    def handle(self, action, next_dispatch, api):
        start = time.perf_counter()
        try:
            return next_dispatch(action)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.metrics.setdefault(action["type"], []).append(elapsed_ms)


def add_twice(amount):
    def thunk(dispatch, get_state):
        dispatch(add(amount))
        dispatch(add(amount))
        return get_state()
    return thunk


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    timing = TimingMiddleware()
    store = create_store(
        counter_reducer,
        apply_middleware(thunk_middleware, LoggingMiddleware, timing),
    )

    store.dispatch(add(1))
    print("thunk 返回:", store.dispatch(add_twice(2)))
    print("最終狀態:", store.get_state())
    print("耗時統計:", timing.metrics)
