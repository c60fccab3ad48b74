from __future__ import annotations

import inspect
import typing


async def invoke_callback(c: typing.Callable, *args):
    "Call c, awaiting the result if it turns out to be a coroutine function."
    result = c(*args)
    if inspect.isawaitable(result):
        return await result
    return result


def maybe_int(val: float):
    return int(val) if val.is_integer() else val
