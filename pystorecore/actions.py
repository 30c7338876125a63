"""
基於 PyStoreCore 的 Action 定義模組。

此模組提供 Action 類別、創建 Action 的功能，以及 store 內部保留的 Action 類型。
Actions 是描述狀態變更意圖的不可變結構化記錄，唯一必要的欄位是 type。
"""
import random
import string
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, Optional, Union

from immutables import Map


def _random_string() -> str:
    """產生以點號分隔的隨機字串，用於保留的 Action 類型。"""
    chars = random.choices(string.ascii_lowercase + string.digits, k=6)
    return ".".join(chars)


def _freeze(obj: Any) -> Any:
    """將 payload 轉換為不可變形式"""
    if isinstance(obj, (dict, Map)):
        # 字典轉為 Map
        return Map({k: _freeze(v) for k, v in obj.items()})
    elif isinstance(obj, list):
        # 列表轉為元組
        return tuple(_freeze(i) for i in obj)
    elif isinstance(obj, (set, frozenset)):
        # 集合轉為凍結集合
        return frozenset(_freeze(i) for i in obj)
    return obj


class Action(Mapping):
    """
    表示一個有類型和任意附加欄位的動作。

    Action 本身是一個不可變的 Mapping，內部以 immutables.Map 儲存，
    因此 reducer 可以用 action["type"] 或 action.type 兩種方式讀取類型。

    屬性:
        type: 動作的類型
        payload: 動作的負載數據（可選）
    """
    __slots__ = ("_data",)

    def __init__(self, type: Any, payload: Any = None, **fields: Any):
        data: Dict[str, Any] = {"type": type}
        if payload is not None:
            data["payload"] = _freeze(payload)
        for key, value in fields.items():
            data[key] = _freeze(value)
        object.__setattr__(self, "_data", Map(data))

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")

    @property
    def type(self) -> Any:
        return self._data["type"]

    @property
    def payload(self) -> Any:
        return self._data.get("payload")

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self):
        return hash(self._data)

    def __repr__(self):
        extra = ", ".join(f"{k}={v!r}" for k, v in self._data.items() if k != "type")
        if extra:
            return f"Action(type={self.type!r}, {extra})"
        return f"Action(type={self.type!r})"


def is_plain_object(value: Any) -> bool:
    """判斷一個值是否可以作為 Action 的結構化記錄。"""
    return isinstance(value, Mapping)


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> Callable[..., Action]:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> increment()  # 返回 Action(type='[Counter] Increment')
        >>>
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)  # 返回 Action(type='[Counter] Add', payload=5)
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action:
        if prepare_fn:
            return Action(action_type, prepare_fn(*args, **kwargs))
        elif len(args) == 1 and not kwargs:
            return Action(action_type, args[0])
        elif args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, payload)

        # 無參數，無負載
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore

    return action_creator


class ActionTypes:
    """
    store 內部保留的 Action 類型。

    應用程式的 reducer 不應處理這些類型，應將它們視為未知 Action 並返回當前或預設狀態。
    """
    INIT = f"@@pystorecore/INIT.{_random_string()}"
    REPLACE = f"@@pystorecore/REPLACE.{_random_string()}"


def probe_unknown_action() -> Action:
    """產生一個隨機的未知 Action，用於檢查 reducer 是否對未知類型返回預設狀態。"""
    return Action(f"@@pystorecore/PROBE_UNKNOWN_ACTION.{_random_string()}")
