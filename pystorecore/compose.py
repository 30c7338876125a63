import functools
from typing import Any, Callable


def _identity(arg: Any) -> Any:
    return arg


def compose(*funcs: Callable[..., Any]) -> Callable[..., Any]:
    """
    從右到左組合函數。

    compose(f, g, h) 等價於 lambda *args, **kwargs: f(g(h(*args, **kwargs)))，
    最右側的函數接收原始參數，其餘函數各自接收單一的前一個結果。

    Args:
        *funcs: 要組合的函數。

    Returns:
        組合後的函數；沒有函數時返回恆等函數，只有一個函數時返回它本身。
    """
    if len(funcs) == 0:
        return _identity

    if len(funcs) == 1:
        return funcs[0]

    def pipe(a: Callable[..., Any], b: Callable[..., Any]) -> Callable[..., Any]:
        def composed(*args: Any, **kwargs: Any) -> Any:
            return a(b(*args, **kwargs))
        return composed

    return functools.reduce(pipe, funcs)
