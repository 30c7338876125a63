import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from .actions import ActionTypes, Action, probe_unknown_action, is_plain_object
from .config import get_settings
from .errors import ReducerReturnedNoneError
from .types import Reducer, S

logger = logging.getLogger(__name__)


def _action_type(action: Any) -> Any:
    if isinstance(action, Mapping):
        return action.get("type")
    return None


def create_reducer(initial_state: S, *handlers) -> Reducer:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態，當 reducer 收到 None 狀態時返回。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    action_handlers = {}  # 儲存 action 類型與處理函式的對應關係

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            # 如果 handler 是元組，則解構為 action 類型與處理函式
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            # 如果 handler 是字典，則直接更新到 action_handlers
            action_handlers.update(handler)

    def reducer(state: Optional[S] = None, action: Any = None) -> S:
        """
        Reducer 函式，根據 action 處理狀態變更。

        Args:
            state: 當前狀態，None 時使用初始狀態。
            action: 要處理的 action。

        Returns:
            新的狀態，如果沒有對應的處理器則返回原狀態。
        """
        if state is None:
            state = initial_state

        handler = action_handlers.get(_action_type(action))  # 根據 action 類型查找處理函式
        if handler:
            return handler(state, action)  # 執行處理函式
        return state  # 如果沒有對應處理函式，返回原狀態

    # 設置 reducer 的初始狀態和處理器映射
    reducer.initial_state = initial_state
    reducer.handlers = action_handlers

    return reducer


def on(action_creator_or_type, handler: Callable[[Any, Any], Any]) -> Dict[Any, Callable[[Any, Any], Any]]:
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型字串。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, "type"):
        # 如果是 action 創建器函式，則提取其類型
        action_type = action_creator_or_type.type
    else:
        # 否則直接將其轉為字串作為類型
        action_type = str(action_creator_or_type)

    return {action_type: handler}


def _undefined_state_error_message(key: str, action: Any) -> str:
    action_type = _action_type(action)
    action_description = f'action "{action_type}"' if action_type is not None else "an action"
    return (
        f'Given {action_description}, reducer "{key}" returned None. '
        "To ignore an action, you must explicitly return the previous state."
    )


def _unexpected_state_shape_warning_message(input_state: Any, reducers: Dict[str, Reducer],
                                            action: Any, unexpected_key_cache: Dict[str, bool]) -> Optional[str]:
    """
    檢查輸入狀態的形狀，返回警告訊息或 None。

    Args:
        input_state: reducer 收到的狀態。
        reducers: 有效的 reducers。
        action: 當前的 action。
        unexpected_key_cache: 已警告過的未知鍵快取，會被就地更新。
    """
    reducer_keys = list(reducers)
    if _action_type(action) == ActionTypes.INIT:
        argument_name = "preloaded_state argument passed to create_store"
    else:
        argument_name = "previous state received by the reducer"

    if not reducer_keys:
        return (
            "Store does not have a valid reducer. Make sure the argument passed "
            "to combine_reducers is a mapping whose values are reducers."
        )

    if not is_plain_object(input_state):
        return (
            f'The {argument_name} has unexpected type of "{type(input_state).__name__}". '
            "Expected argument to be a mapping with the following "
            f'keys: "{", ".join(reducer_keys)}"'
        )

    unexpected_keys = [
        key for key in input_state
        if key not in reducers and not unexpected_key_cache.get(key)
    ]
    for key in unexpected_keys:
        unexpected_key_cache[key] = True

    # 替換 reducer 時預期的鍵集合本來就會改變
    if _action_type(action) == ActionTypes.REPLACE:
        return None

    if unexpected_keys:
        return (
            f'Unexpected {"keys" if len(unexpected_keys) > 1 else "key"} '
            f'"{", ".join(str(k) for k in unexpected_keys)}" found in {argument_name}. '
            "Expected to find one of the known reducer keys instead: "
            f'"{", ".join(reducer_keys)}". Unexpected keys will be ignored.'
        )
    return None


def _assert_reducer_shape(reducers: Dict[str, Reducer]) -> None:
    """檢查每個 reducer 都能對 INIT 與未知 Action 返回非 None 的初始狀態。"""
    for key, reducer in reducers.items():
        initial_state = reducer(None, Action(ActionTypes.INIT))
        if initial_state is None:
            raise ReducerReturnedNoneError(
                f'Reducer "{key}" returned None during initialization. '
                "If the state passed to the reducer is None, you must "
                "explicitly return the initial state. The initial state may not be None.",
                reducer_name=key,
                action_type=ActionTypes.INIT,
            )

        probe = probe_unknown_action()
        if reducer(None, probe) is None:
            raise ReducerReturnedNoneError(
                f'Reducer "{key}" returned None when probed with a random type. '
                f'Don\'t try to handle {ActionTypes.INIT} or other actions in the "@@pystorecore/*" '
                "namespace. They are considered private. Instead, you must return the "
                "current state for any unknown actions, unless it is None, "
                "in which case you must return the initial state, regardless of the action type.",
                reducer_name=key,
                action_type=probe.type,
            )


def combine_reducers(reducers: Dict[str, Any]) -> Reducer:
    """
    將多個 reducer 合併為一個，每個 reducer 管理狀態中同名鍵下的子狀態。

    不可呼叫的項目會被略過（非 production 環境下記錄警告），不會讓組合失敗。
    各 reducer 在組合時會被探測一次，探測失敗的錯誤會被快取，
    並在每次呼叫組合後的 reducer 時重新拋出。

    Args:
        reducers: 鍵到 reducer 的映射。

    Returns:
        組合後的 reducer，當所有子狀態都沒有變化時返回原本的 state 物件。
    """
    production = get_settings().production

    final_reducers: Dict[str, Reducer] = {}
    for key, reducer in reducers.items():
        if not production:
            if reducer is None:
                logger.warning('No reducer provided for key "%s"', key)
            elif not callable(reducer):
                logger.warning('Reducer provided for key "%s" is not callable and will be ignored', key)
        if callable(reducer):
            final_reducers[key] = reducer

    unexpected_key_cache: Dict[str, bool] = {}

    shape_assertion_error: Optional[Exception] = None
    try:
        _assert_reducer_shape(final_reducers)
    except Exception as err:
        # 延遲到第一次使用時再拋出
        shape_assertion_error = err

    def combination(state: Any = None, action: Any = None) -> Any:
        if shape_assertion_error is not None:
            raise shape_assertion_error

        if state is None:
            state = {}

        if not production:
            warning_message = _unexpected_state_shape_warning_message(
                state, final_reducers, action, unexpected_key_cache
            )
            if warning_message:
                logger.warning(warning_message)

        has_changed = False
        next_state = {}
        for key, reducer in final_reducers.items():
            previous_state_for_key = state.get(key) if isinstance(state, Mapping) else None
            next_state_for_key = reducer(previous_state_for_key, action)
            if next_state_for_key is None:
                raise ReducerReturnedNoneError(
                    _undefined_state_error_message(key, action),
                    reducer_name=key,
                    action_type=_action_type(action),
                )
            next_state[key] = next_state_for_key
            # 任一子狀態的引用改變即視為狀態改變
            has_changed = has_changed or next_state_for_key is not previous_state_for_key

        return next_state if has_changed else state

    combination.reducer_keys = tuple(final_reducers)
    return combination
