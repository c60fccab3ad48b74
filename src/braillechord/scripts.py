import argparse
import datetime
import logging
import pathlib
import typing

import trio

from .braille import keys_to_cell
from .durations import format_duration, parse_duration
from .recognizer import ChordRecognizer
from .settings import CHORD_PRESETS, Settings
from .types import ChordInvalid, ChordMatched, FocusLost, KeyEvent

logger = logging.getLogger(__name__)

ScriptStep = KeyEvent | FocusLost | datetime.timedelta


def parse_key_script(script: str) -> list[ScriptStep]:
    """Parse a whitespace-separated key script.

    "+s" presses s, "-s" releases it, "!" means the window lost focus, and anything else is a pause such as "20ms".
    """
    steps: list[ScriptStep] = []
    for token in script.split():
        if token == "!":
            steps.append(FocusLost())
        elif token[0] == "+" and len(token) == 2:
            steps.append(KeyEvent.pressed(token[1]))
        elif token[0] == "-" and len(token) == 2 and not token[1].isdigit():
            steps.append(KeyEvent.released(token[1]))
        else:
            pause = parse_duration(token)
            if pause < datetime.timedelta():
                raise ValueError(f"Pause {token!r} is negative")
            steps.append(pause)
    return steps


def describe(event: ChordMatched | ChordInvalid) -> str:
    keys = "+".join(key.upper() for key in event.keys)
    if isinstance(event, ChordMatched):
        return f"{event.timestamp:8.3f}  {keys:<12} {keys_to_cell(event.keys)}  {event.action}"
    return f"{event.timestamp:8.3f}  {keys:<12} {keys_to_cell(event.keys)}  (no chord)"


async def replay(settings: Settings, steps: typing.Sequence[ScriptStep]) -> list[ChordMatched | ChordInvalid]:
    recognizer = ChordRecognizer(settings.make_dictionary(), settings.debounce_provider())
    results = []
    recognizer.on_chord(results.append)
    recognizer.on_invalid(results.append)
    send_channel, receive_channel = trio.open_memory_channel(0)
    async with trio.open_nursery() as nursery:
        await nursery.start(recognizer.run, receive_channel)
        async with send_channel:
            for step in steps:
                if isinstance(step, datetime.timedelta):
                    await trio.sleep(step.total_seconds())
                else:
                    await send_channel.send(step)
    return results


def load_settings(args: argparse.Namespace) -> Settings:
    if args.settings is not None:
        settings = Settings.load(args.settings)
    else:
        settings = Settings.default(chord_preset=args.preset)
    if args.debounce is not None:
        settings.set_debounce(args.debounce)
    return settings


common_parser = argparse.ArgumentParser(add_help=False)
common_config_group = common_parser.add_mutually_exclusive_group()
common_config_group.add_argument("--settings", type=pathlib.Path)
common_config_group.add_argument("--preset", choices=sorted(CHORD_PRESETS), default="braille")
common_parser.add_argument("--debounce", type=parse_duration)
common_parser.add_argument("-v", "--verbose", action="store_true")

replay_parser = argparse.ArgumentParser(parents=[common_parser], description="Replay a key script through a chord recognizer.")
replay_parser.add_argument("script", nargs="?", help="key script such as '+s +d 20ms -s -d'; read from stdin if omitted")


def replay_cli():
    args = replay_parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    settings = load_settings(args)
    script = args.script if args.script is not None else input()
    logger.info("Replaying with debounce %s", format_duration(settings.debounce))
    results = trio.run(replay, settings, parse_key_script(script))
    for event in results:
        print(describe(event))


list_chords_parser = argparse.ArgumentParser(parents=[common_parser], description="List the chords a recognizer would accept.")


def list_chords_cli():
    args = list_chords_parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    dictionary = load_settings(args).make_dictionary()
    for action, keys in dictionary.mappings().items():
        print(f"{action:<8} {dictionary.chord_string(action):<12} {keys_to_cell(keys)}")
