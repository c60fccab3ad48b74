# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
from contextlib import aclosing, asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterable, Optional, cast

import msgspec
import trio

from .alphabet import KeyAlphabet
from .clock import DebounceProvider
from .recognizer import ChordRecognizer
from .types import ChordEvent, FocusLost, InputEvent, KeyEvent, KeyPress

if TYPE_CHECKING:
    from .dictionary import ChordDictionary
    from .settings import Settings


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: drop keys outside the alphabet, case-fold the rest, and collapse repeats of keys already down
class NormalizeKeys(Section):
    def __init__(self, alphabet: KeyAlphabet):
        self.alphabet = alphabet
        self.held: set[str] = set()

    async def pump(self, source: trio.MemoryReceiveChannel[InputEvent], sink: trio.MemorySendChannel[InputEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                if isinstance(event, FocusLost):
                    self.held.clear()
                    await sink.send(event)
                    continue
                key = self.alphabet.normalize(event.key)
                if key is None:
                    continue
                if event.press is KeyPress.RELEASED:
                    if key not in self.held:
                        continue
                    self.held.discard(key)
                    await sink.send(msgspec.structs.replace(event, key=key))
                else:
                    if key in self.held:
                        continue
                    self.held.add(key)
                    await sink.send(KeyEvent.pressed(key))


# stage 2: fold presses and releases into chords
class RecognizeChords(Section):
    def __init__(self, dictionary: ChordDictionary, debounce: Optional[DebounceProvider] = None):
        self.recognizer = ChordRecognizer(dictionary, debounce)

    async def pump(self, source: trio.MemoryReceiveChannel[InputEvent], sink: trio.MemorySendChannel[ChordEvent]):
        async with aclosing(sink):
            self.recognizer.on_chord(sink.send)
            self.recognizer.on_invalid(sink.send)
            await self.recognizer.run(source)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_chordstream(
    key_event_channel: trio.MemoryReceiveChannel[InputEvent],
    settings: Settings,
):
    dictionary = settings.make_dictionary()
    sections = [
        NormalizeKeys(dictionary.alphabet),
        RecognizeChords(dictionary, settings.debounce_provider()),
    ]

    async with pump_all(key_event_channel, *sections) as chordstream:
        yield cast(trio.MemoryReceiveChannel[ChordEvent], chordstream)
