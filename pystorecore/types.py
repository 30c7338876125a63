"""
PyStoreCore 共用的類型定義。
"""
from typing import Any, Callable, Mapping, TypeVar

from typing_extensions import Protocol

S = TypeVar("S")
T = TypeVar("T")

# Action 是任何帶有 "type" 欄位的 Mapping
ActionLike = Mapping[str, Any]

Reducer = Callable[[Any, ActionLike], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
DispatchFunction = Callable[[Any], Any]
NextDispatch = DispatchFunction
MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]
StateSelector = Callable[[Any], Any]


class MiddlewareAPIProtocol(Protocol):
    """中介軟體工廠可見的受限 store 介面。"""

    def get_state(self) -> Any: ...

    def dispatch(self, action: Any) -> Any: ...


Middleware = Callable[[MiddlewareAPIProtocol], MiddlewareFunction]
StoreCreator = Callable[..., Any]
StoreEnhancer = Callable[[StoreCreator], StoreCreator]


class Observer(Protocol):
    """可接收狀態推送的觀察者。"""

    def on_next(self, value: Any) -> None: ...
