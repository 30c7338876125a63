"""
基於 PyStoreCore 的中介軟體定義模組。

此模組提供 apply_middleware 增強器，將一組有序的中介軟體包裹在 store 的 dispatch 外層，
以及 BaseMiddleware，讓中介軟體可以用物件的形式實作 handle(action, next_dispatch)。
"""

import contextlib
import inspect
import logging
from typing import Any, Callable, Dict, Generator, List

from .compose import compose
from .errors import DispatchDuringMiddlewareConstructionError
from .types import (
    DispatchFunction, MiddlewareFunction, NextDispatch, StoreCreator, StoreEnhancer
)

logger = logging.getLogger(__name__)

ActionContext = Dict[str, Any]


class MiddlewareAPI:
    """
    中介軟體工廠可見的受限 store 介面，只提供 get_state 與 dispatch。

    dispatch 會轉發到最終組合完成的中介軟體鏈；鏈構建完成前呼叫會拋出錯誤。
    """

    def __init__(self, get_state: Callable[[], Any], dispatch: DispatchFunction):
        self._get_state = get_state
        self._dispatch = dispatch

    def get_state(self) -> Any:
        return self._get_state()

    def dispatch(self, action: Any) -> Any:
        return self._dispatch(action)


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，以物件形式實作的中介軟體。

    實例本身就是中介軟體工廠：apply_middleware 會以 MiddlewareAPI 呼叫它，
    之後每個經過的 action 都會交給 handle(action, next_dispatch, api)。
    api 只保存在每個 store 各自的鏈中，同一個實例套用到多個 store 時互不干擾。
    預設的 handle 會在轉發前後呼叫 on_next、on_complete 與 on_error 鉤子。
    子類可以覆寫 handle 來轉換 action、短路或重新分發。
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        """
        綁定受限的 store 介面並返回中介軟體函數。

        Args:
            api: MiddlewareAPI 實例

        Returns:
            配置函數，接收 next_dispatch 並返回新的 dispatch 函數
        """
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any) -> Any:
                return self.handle(action, next_dispatch, api)
            return dispatch
        return middleware

    def handle(self, action: Any, next_dispatch: NextDispatch, api: MiddlewareAPI) -> Any:
        """
        處理一個 action，預設行為是直接轉發給下一層。

        Args:
            action: 正在 dispatch 的 Action
            next_dispatch: 下一層的 dispatch 函數
            api: 所屬 store 的 MiddlewareAPI

        Returns:
            下一層 dispatch 的返回值
        """
        with self.action_context(action, api.get_state()) as context:
            context["result"] = next_dispatch(action)
            context["next_state"] = api.get_state()
        return context["result"]

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 轉發給下一層之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的 store 狀態
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在下一層處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新 store 狀態
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子，異常隨後會繼續向上拋出。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        提供一個上下文管理器來處理 action 分發的生命週期。

        Args:
            action: 要分發的 Action
            prev_state: 分發前的狀態

        Yields:
            包含上下文數據的字典，可用於在上下文內部與外部之間傳遞數據
        """
        context: ActionContext = {
            "action": action,
            "prev_state": prev_state,
            "next_state": None,
            "result": None,
            "error": None,
        }

        # 前置處理
        self.on_next(action, prev_state)

        try:
            # 讓出控制權，讓實際的 dispatch 發生
            yield context
        except Exception as err:
            context["error"] = err
            self.on_error(err, action)
            raise

        self.on_complete(context["next_state"], action)


def apply_middleware(*middlewares: Any) -> StoreEnhancer:
    """
    創建一個 store 增強器，將中介軟體按順序包裹在 dispatch 外層。

    第一個中介軟體最先看到原始的 action；每個中介軟體自行決定是否以及如何呼叫下一層。
    中介軟體可以是 api -> next_dispatch -> action 形式的函數、BaseMiddleware 實例或類別
    （類別會在每次建立 store 時以無參數實例化）。

    範例:
        >>> store = create_store(reducer, apply_middleware(logger_mw, crash_reporter))

    Args:
        *middlewares: 要套用的中介軟體。

    Returns:
        接收 create_store 並返回增強後建構函式的增強器。
    """
    def enhancer(create_store: StoreCreator) -> StoreCreator:
        def enhanced_create_store(*args: Any, **kwargs: Any) -> Any:
            store = create_store(*args, **kwargs)

            def dispatch(action: Any) -> Any:
                raise DispatchDuringMiddlewareConstructionError(action)

            api = MiddlewareAPI(
                get_state=store.get_state,
                dispatch=lambda action: dispatch(action),
            )
            # 接受類和實例，類在每個 store 建立時各自實例化
            instances: List[Any] = [m() if inspect.isclass(m) else m for m in middlewares]
            # 串聯所有的中介軟體
            chain = [middleware(api) for middleware in instances]
            dispatch = compose(*chain)(store.dispatch)

            # 以增強後的 dispatch 取代原本的 dispatch
            store.dispatch = dispatch
            logger.debug("Middleware chain built with %d middleware", len(chain))
            return store

        return enhanced_create_store

    return enhancer
