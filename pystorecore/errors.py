"""
PyStoreCore 錯誤處理模組。

所有由 store、reducer 組合與中介軟體鏈拋出的異常都定義在此。
ActionError 系列屬於可恢復的輸入驗證錯誤，其餘皆為程式設計錯誤，應直接修正呼叫端。
"""
import traceback as _traceback
from typing import Any, Dict, Optional


class PyStoreCoreError(Exception):
    """所有 PyStoreCore 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = "".join(_traceback.format_stack()[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """將錯誤轉換為可序列化的字典。"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        return self.message


class ActionError(PyStoreCoreError):
    """與 Action 相關的錯誤，在 dispatch 邊界可被呼叫端捕獲處理。"""

    def __init__(self, message: str, action: Any = None, **kwargs: Any):
        details = {"action": repr(action)}
        details.update(kwargs)
        super().__init__(message, details)
        self.action = action


class ReducerError(PyStoreCoreError):
    """與 Reducer 相關的錯誤。"""

    def __init__(self, message: str, reducer_name: Optional[str] = None,
                 action_type: Any = None, **kwargs: Any):
        details = {"reducer_name": reducer_name, "action_type": action_type}
        details.update(kwargs)
        super().__init__(message, details)
        self.reducer_name = reducer_name
        self.action_type = action_type


class StoreError(PyStoreCoreError):
    """與 Store 相關的錯誤。"""

    def __init__(self, message: str, operation: str, **kwargs: Any):
        details = {"operation": operation}
        details.update(kwargs)
        super().__init__(message, details)
        self.operation = operation


class MiddlewareError(PyStoreCoreError):
    """與 Middleware 相關的錯誤。"""

    def __init__(self, message: str, middleware_name: Optional[str] = None, **kwargs: Any):
        details = {"middleware_name": middleware_name}
        details.update(kwargs)
        super().__init__(message, details)
        self.middleware_name = middleware_name


class ConfigurationError(PyStoreCoreError):
    """配置相關的錯誤。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component, "config_key": config_key}
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


# ———— 參數形狀錯誤 ————
class InvalidEnhancerError(ConfigurationError, TypeError):
    """enhancer 不是可呼叫對象。"""

    def __init__(self, enhancer: Any):
        super().__init__(
            "Expected the enhancer to be a function.",
            component="create_store",
            config_key="enhancer",
            received=type(enhancer).__name__,
        )


class InvalidReducerError(ReducerError, TypeError):
    """reducer 不是可呼叫對象。"""

    def __init__(self, reducer: Any, argument: str = "reducer"):
        super().__init__(
            f"Expected the {argument} to be a function.",
            received=type(reducer).__name__,
        )


class InvalidListenerError(StoreError, TypeError):
    """listener 不是可呼叫對象。"""

    def __init__(self, listener: Any):
        super().__init__(
            "Expected the listener to be a function.",
            operation="subscribe",
            received=type(listener).__name__,
        )


class InvalidObserverError(StoreError, TypeError):
    """observer 不是結構化對象。"""

    def __init__(self, observer: Any):
        super().__init__(
            "Expected the observer to be an object.",
            operation="observable.subscribe",
            received=type(observer).__name__,
        )


# ———— dispatch 邊界的輸入驗證錯誤 ————
class InvalidActionError(ActionError, ValueError):
    """dispatch 的值不是結構化記錄 (Mapping)。"""

    def __init__(self, action: Any):
        super().__init__(
            "Actions must be plain mappings. Use custom middleware for async actions.",
            action=action,
            received=type(action).__name__,
        )


class MissingActionTypeError(ActionError, ValueError):
    """Action 缺少 type 欄位。"""

    def __init__(self, action: Any):
        super().__init__(
            'Actions may not have a missing or None "type" entry. '
            "Have you misspelled a constant?",
            action=action,
        )


# ———— 重入錯誤 ————
class ReentrancyError(StoreError):
    """在 reducer 執行期間呼叫了 store 的操作。"""


class ReentrantDispatchError(ReentrancyError):
    def __init__(self):
        super().__init__("Reducers may not dispatch actions.", operation="dispatch")


class ReentrantReadError(ReentrancyError):
    def __init__(self):
        super().__init__(
            "You may not call store.get_state() while the reducer is executing. "
            "The reducer has already received the state as an argument. "
            "Pass it down from the top reducer instead of reading it from the store.",
            operation="get_state",
        )


class ReentrantSubscribeError(ReentrancyError):
    def __init__(self):
        super().__init__(
            "You may not call store.subscribe() while the reducer is executing. "
            "If you would like to be notified after the store has been updated, "
            "subscribe from outside the reducer and call store.get_state() in the callback.",
            operation="subscribe",
        )


class ReentrantUnsubscribeError(ReentrancyError):
    def __init__(self):
        super().__init__(
            "You may not unsubscribe from a store listener while the reducer is executing.",
            operation="unsubscribe",
        )


# ———— Reducer 返回值錯誤 ————
class ReducerReturnedNoneError(ReducerError):
    """reducer 對真實 dispatch 或初始化探測返回了 None。"""


# ———— 中介軟體錯誤 ————
class DispatchDuringMiddlewareConstructionError(MiddlewareError):
    """中介軟體工廠在鏈構建完成前呼叫了 dispatch。"""

    def __init__(self, action: Any = None):
        super().__init__(
            "Dispatching while constructing your middleware is not allowed. "
            "Other middleware would not be applied to this dispatch.",
            action=repr(action),
        )
