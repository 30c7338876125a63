"""
使用 PyStoreCore 的簡單計數器示例
"""

import logging

from pystorecore import (
    combine_reducers,
    create_action,
    create_reducer,
    create_store,
    on,
)

# ============== 定義 Actions ==============
increment = create_action("[Counter] Increment")
decrement = create_action("[Counter] Decrement")
reset = create_action("[Counter] Reset", lambda value=0: value)
increment_by = create_action("[Counter] IncrementBy")
add_todo = create_action("[Todos] Add", lambda text: text)

# ============== 定義 Reducers ==============
counter_reducer = create_reducer(
    {"count": 0},
    on(increment, lambda state, action: {**state, "count": state["count"] + 1}),
    on(decrement, lambda state, action: {**state, "count": state["count"] - 1}),
    on(reset, lambda state, action: {**state, "count": action.payload}),
    on(increment_by, lambda state, action: {**state, "count": state["count"] + action.payload}),
)

todos_reducer = create_reducer(
    (),
    on(add_todo, lambda state, action: state + (action.payload,)),
)

root_reducer = combine_reducers({"counter": counter_reducer, "todos": todos_reducer})


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    store = create_store(root_reducer)

    # 訂閱狀態變化
    unsubscribe = store.subscribe(lambda: print(f"狀態更新: {store.get_state()}"))

    # 只觀察計數
    store.select(lambda state: state["counter"]["count"]).subscribe(
        on_next=lambda count: print(f"計數: {count}")
    )

    print("\n==== 開始測試基本操作 ====")
    store.dispatch(increment())
    store.dispatch(increment_by(5))
    store.dispatch(decrement())
    store.dispatch(reset(10))
    store.dispatch(add_todo("寫文件"))

    unsubscribe()

    print("\n==== 最終狀態 ====")
    print(store.state)
