from __future__ import annotations

import collections.abc
import datetime
import logging
import typing
from contextlib import aclosing, asynccontextmanager

import trio
import trio_util

from .clock import MIN_DEBOUNCE, DebounceProvider, DebounceTimer, fixed_debounce
from .commontypes import ChordError, NotRunningError
from .durations import format_duration
from .types import ChordInvalid, ChordMatched, FocusLost, InputEvent, KeyPress
from .util import invoke_callback

if typing.TYPE_CHECKING:
    from .dictionary import ChordDictionary

logger = logging.getLogger(__name__)

ChordCallback = collections.abc.Callable[[ChordMatched], typing.Optional[collections.abc.Awaitable[None]]]
InvalidCallback = collections.abc.Callable[[ChordInvalid], typing.Optional[collections.abc.Awaitable[None]]]


class ChordSession:
    """State of one in-progress gesture.

    held shrinks and grows with the physical keys; ever_held only grows, and is what gets looked up once everything
    has been released and the debounce window has passed.
    """

    held: set[str]
    ever_held: set[str]
    pending: typing.Optional[DebounceTimer]

    def __init__(self):
        self.held = set()
        self.ever_held = set()
        self.pending = None

    def __repr__(self):
        return f"<ChordSession held={sorted(self.held)} ever_held={sorted(self.ever_held)} pending={self.pending!r}>"

    def press(self, key: str):
        self.held.add(key)
        self.ever_held.add(key)

    def release(self, key: str):
        self.held.discard(key)

    def cancel_pending(self):
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None


class ChordRecognizer:
    """Turns key presses and releases into chord events.

    Bind it to a key event source with run() (usually via open_recognizer). Matched chords go to the on_chord
    callbacks and unmatched gestures go to the on_invalid callbacks; nothing else is observable.

    If the host can lose key releases (for instance when the window loses focus with keys still down), it must call
    reset() or put a FocusLost into the event stream, since otherwise the session waits forever for those releases.
    """

    session: typing.Optional[ChordSession]
    held_keys: trio_util.AsyncValue[frozenset[str]]

    def __init__(self, dictionary: ChordDictionary, debounce: typing.Optional[DebounceProvider] = None):
        self.dictionary = dictionary
        self.alphabet = dictionary.alphabet
        self.debounce_provider = fixed_debounce() if debounce is None else debounce
        self.session = None
        self.held_keys = trio_util.AsyncValue(frozenset())
        self.chord_callbacks: list[ChordCallback] = []
        self.invalid_callbacks: list[InvalidCallback] = []
        self._enabled = True
        self._nursery: typing.Optional[trio.Nursery] = None
        self._torn_down = False

    def on_chord(self, callback: ChordCallback) -> ChordCallback:
        self.chord_callbacks.append(callback)
        return callback

    def on_invalid(self, callback: InvalidCallback) -> InvalidCallback:
        self.invalid_callbacks.append(callback)
        return callback

    def set_debounce_provider(self, provider: DebounceProvider):
        # Already-scheduled finalizes keep the duration they were scheduled with.
        self.debounce_provider = provider

    @property
    def enabled(self):
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        self._enabled = value
        if not value:
            self.reset()

    @property
    def running(self):
        return self._nursery is not None

    def current_keys(self) -> tuple[str, ...]:
        if self.session is None:
            return ()
        return self.alphabet.sort(self.session.held)

    def has_keys_down(self):
        return self.session is not None and bool(self.session.held)

    def reset(self):
        if self.session is not None:
            logger.debug("Discarding %r", self.session)
            self.session.cancel_pending()
        self.session = None
        self.held_keys.value = frozenset()

    def teardown(self):
        self._torn_down = True
        self.reset()
        if self._nursery is not None:
            self._nursery.cancel_scope.cancel()

    def handle_event(self, event: InputEvent):
        """Feed one event in directly.

        Key events need a running recognizer (see run()) to schedule finalizes in, so any key in the alphabet raises
        NotRunningError until one is bound, whether it is pressed or released. FocusLost, keys outside the alphabet
        and anything sent while disabled are accepted regardless.
        """
        if self._torn_down:
            return
        if isinstance(event, FocusLost):
            self.reset()
            return
        if not self._enabled:
            return
        key = self.alphabet.normalize(event.key)
        if key is None:
            return
        if self._nursery is None:
            raise NotRunningError()
        if event.press is KeyPress.RELEASED:
            self._key_up(key)
        else:
            self._key_down(key)

    def _key_down(self, key: str):
        if self.session is None:
            self.session = ChordSession()
            logger.debug("Starting a new gesture with %r", key)
        elif self.session.pending is not None:
            logger.debug("%r pressed before finalize; continuing the gesture", key)
            self.session.cancel_pending()
        self.session.press(key)
        self.held_keys.value = frozenset(self.session.held)

    def _key_up(self, key: str):
        session = self.session
        if session is None or key not in session.held:
            return
        session.release(key)
        self.held_keys.value = frozenset(session.held)
        if not session.held:
            self._schedule_finalize(session)

    def _schedule_finalize(self, session: ChordSession):
        assert self._nursery is not None
        session.cancel_pending()
        delay = max(self.debounce_provider(), MIN_DEBOUNCE)
        logger.debug("All keys released; finalizing in %s", format_duration(delay))
        session.pending = DebounceTimer.schedule(self._nursery, delay, lambda timer: self._finalize(session, timer))

    async def _finalize(self, session: ChordSession, timer: DebounceTimer):
        # The timer may have finished sleeping just as a key-down or a reset got processed.
        if self._torn_down or self.session is not session or session.pending is not timer:
            return
        self.session = None
        keys = self.alphabet.sort(session.ever_held)
        action = self.dictionary.lookup(keys)
        timestamp = trio.current_time()
        if action is None:
            logger.debug("No chord for %r", keys)
            await self._emit(self.invalid_callbacks, ChordInvalid(keys=keys, timestamp=timestamp))
        else:
            logger.debug("Chord %r recognized from %r", action, keys)
            await self._emit(self.chord_callbacks, ChordMatched(action=action, keys=keys, timestamp=timestamp))

    async def _emit(self, callbacks: list, event: ChordMatched | ChordInvalid):
        for callback in list(callbacks):
            if self._torn_down:
                return
            await invoke_callback(callback, event)

    async def run(
        self,
        source: collections.abc.AsyncIterable[InputEvent],
        *,
        task_status=trio.TASK_STATUS_IGNORED,
    ):
        if self._torn_down:
            raise ChordError("Recognizer has been torn down")
        if self._nursery is not None:
            raise ChordError("Recognizer is already bound to a key event source")
        async with aclosing(source), trio.open_nursery() as nursery:
            self._nursery = nursery
            task_status.started()
            try:
                async for event in source:
                    self.handle_event(event)
            finally:
                self._nursery = None
        logger.debug("Recognizer detached from key event source")


@asynccontextmanager
async def open_recognizer(
    dictionary: ChordDictionary,
    source: collections.abc.AsyncIterable[InputEvent],
    debounce: typing.Optional[DebounceProvider] = None,
    on_chord: typing.Optional[ChordCallback] = None,
    on_invalid: typing.Optional[InvalidCallback] = None,
):
    recognizer = ChordRecognizer(dictionary, debounce)
    if on_chord is not None:
        recognizer.on_chord(on_chord)
    if on_invalid is not None:
        recognizer.on_invalid(on_invalid)
    async with trio.open_nursery() as nursery:
        await nursery.start(recognizer.run, source)
        try:
            yield recognizer
        finally:
            recognizer.teardown()


def debounce_from_value(value: trio_util.AsyncValue[datetime.timedelta]) -> DebounceProvider:
    "Use a live value (for instance one bound to a tuning control) as the debounce provider."

    def provider():
        return value.value

    return provider
