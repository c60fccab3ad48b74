"""Debounce timing for chord finalization.

The recognizer asks a provider for the debounce duration each time every key has been released, so a tuning control
can change it between gestures. The wait itself is a cancelable task in a trio nursery; tests substitute
trio.testing.MockClock for the real clock.
"""
from __future__ import annotations

import collections.abc
import datetime
import logging
import typing

import trio

from .durations import format_duration
from .util import invoke_callback

logger = logging.getLogger(__name__)

DebounceProvider = collections.abc.Callable[[], datetime.timedelta]
TimerCallback = typing.Callable[["DebounceTimer"], typing.Optional[collections.abc.Awaitable[None]]]

DEFAULT_DEBOUNCE = datetime.timedelta(milliseconds=50)
MIN_DEBOUNCE = datetime.timedelta()
MAX_DEBOUNCE = datetime.timedelta(milliseconds=500)


def clamp_debounce(val: datetime.timedelta) -> datetime.timedelta:
    clamped = min(MAX_DEBOUNCE, max(MIN_DEBOUNCE, val))
    if clamped != val:
        logger.warning("Debounce %s is out of range; using %s", format_duration(val), format_duration(clamped))
    return clamped


def fixed_debounce(val: datetime.timedelta = DEFAULT_DEBOUNCE) -> DebounceProvider:
    def provider():
        return val

    return provider


class DebounceTimer:
    """A single scheduled callback that can be canceled before it fires.

    Cancellation is only guaranteed to stop the callback while the timer is still sleeping; once the sleep completes
    the callback runs, so callers that can race with it should check whether this timer is still the one they want.
    """

    fired: bool
    canceled: bool

    def __init__(self, delay: datetime.timedelta, callback: TimerCallback):
        self.delay = delay
        self.callback = callback
        self.cancel_scope = trio.CancelScope()
        self.fired = False
        self.canceled = False

    def __repr__(self):
        return f"<DebounceTimer {format_duration(self.delay)} fired={self.fired} canceled={self.canceled}>"

    @classmethod
    def schedule(cls, nursery: trio.Nursery, delay: datetime.timedelta, callback: TimerCallback) -> DebounceTimer:
        timer = cls(delay, callback)
        nursery.start_soon(timer._run, name=repr(timer))
        return timer

    @property
    def pending(self):
        return not (self.fired or self.canceled)

    def cancel(self):
        if self.fired:
            return
        self.canceled = True
        self.cancel_scope.cancel()

    async def _run(self):
        with self.cancel_scope:
            await trio.sleep(self.delay.total_seconds())
            if self.canceled:
                return
            self.fired = True
        if self.fired:
            await invoke_callback(self.callback, self)
