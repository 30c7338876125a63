"""
PyStoreCore: 可預測的同步狀態容器。

單一的可變狀態只能經由純函數 reducer 改變，並提供訂閱機制、reducer 組合與中介軟體鏈。
"""
import logging

from .errors import (
    PyStoreCoreError, ActionError, ReducerError, StoreError, MiddlewareError,
    ConfigurationError, InvalidEnhancerError, InvalidReducerError,
    InvalidListenerError, InvalidObserverError, InvalidActionError,
    MissingActionTypeError, ReentrancyError, ReentrantDispatchError,
    ReentrantReadError, ReentrantSubscribeError, ReentrantUnsubscribeError,
    ReducerReturnedNoneError, DispatchDuringMiddlewareConstructionError,
)
from .actions import Action, ActionTypes, create_action, is_plain_object
from .config import CoreSettings, StoreOptions, get_settings
from .compose import compose
from .reducers import combine_reducers, create_reducer, on
from .store import Store, StateObservable, StateSubscription, create_store
from .middleware import BaseMiddleware, MiddlewareAPI, apply_middleware

logging.getLogger(__name__).addHandler(logging.NullHandler())

# 匯出所有公開 API
__all__ = [
    # Errors
    "PyStoreCoreError", "ActionError", "ReducerError", "StoreError",
    "MiddlewareError", "ConfigurationError", "InvalidEnhancerError",
    "InvalidReducerError", "InvalidListenerError", "InvalidObserverError",
    "InvalidActionError", "MissingActionTypeError", "ReentrancyError",
    "ReentrantDispatchError", "ReentrantReadError", "ReentrantSubscribeError",
    "ReentrantUnsubscribeError", "ReducerReturnedNoneError",
    "DispatchDuringMiddlewareConstructionError",

    # Actions
    "Action", "ActionTypes", "create_action", "is_plain_object",

    # Config
    "CoreSettings", "StoreOptions", "get_settings",

    # Reducers
    "combine_reducers", "create_reducer", "on",

    # Store
    "Store", "StateObservable", "StateSubscription", "create_store",

    # Middleware
    "BaseMiddleware", "MiddlewareAPI", "apply_middleware",
    "compose",
]
