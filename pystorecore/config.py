"""
基於 PyStoreCore 的配置模組。

CoreSettings 描述執行環境 (是否為 production)，
StoreOptions 則是 create_store 的可選參數在邊界處一次解析後的結果。
"""
import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .errors import InvalidEnhancerError

ENV_VAR = "PYSTORECORE_ENV"


class CoreSettings(BaseModel):
    """
    全域執行設定。

    Attributes:
        env: 執行環境名稱，"production" 時會關閉非致命的形狀診斷。
    """
    model_config = ConfigDict(frozen=True)

    env: str = "development"

    @property
    def production(self) -> bool:
        return self.env.strip().lower() == "production"


def get_settings() -> CoreSettings:
    """從環境變數讀取目前的設定，每次呼叫都重新讀取。"""
    return CoreSettings(env=os.environ.get(ENV_VAR, "development"))


class StoreOptions(BaseModel):
    """
    create_store 的具名可選參數。

    Attributes:
        preloaded_state: 初始狀態，None 表示沒有預載狀態。
        enhancer: 可選的 store 增強器，接收 create_store 並返回新的建構函式。
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    preloaded_state: Any = None
    enhancer: Optional[Any] = None

    @classmethod
    def resolve(cls, preloaded_state: Any = None, enhancer: Any = None) -> "StoreOptions":
        """
        將位置參數解析為 StoreOptions。

        若第二個參數可呼叫且未提供第三個參數，則將其視為 enhancer，並捨棄預載狀態。

        Args:
            preloaded_state: 預載狀態，或在省略時的 enhancer。
            enhancer: store 增強器。

        Returns:
            解析後的 StoreOptions。

        Raises:
            InvalidEnhancerError: enhancer 存在但不可呼叫。
        """
        if callable(preloaded_state) and enhancer is None:
            enhancer = preloaded_state
            preloaded_state = None

        if enhancer is not None and not callable(enhancer):
            raise InvalidEnhancerError(enhancer)

        return cls(preloaded_state=preloaded_state, enhancer=enhancer)
