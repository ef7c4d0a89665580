"""Text command protocol: command templates, argument checks and dispatch."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

SOCKET_DEFAULT_PORT = 5555
SOCKET_MSG_BUFFER_SIZE = 1024

PROTOCOL_MAX_COMMANDS = 64

MESSAGE_COMMAND_NOT_FOUND = "not found"
MESSAGE_MANY_ARGUMENTS = "many arguments"
MESSAGE_FEW_ARGUMENTS = "few arguments"
MESSAGE_INVALID_ARGUMENT = "invalid argument"

# Command templates: "%x" words are wildcards, a trailing "..." accepts any
# number of further arguments.
EFFECT_ADD = "add %s %i ..."
EFFECT_REMOVE = "remove %i"
EFFECT_ACTIVATE = "activate %i %i"
EFFECT_PRELOAD = "preload %s %i ..."
EFFECT_PRESET_LOAD = "preset_load %i %s"
EFFECT_PRESET_SAVE = "preset_save %i %s %s %s"
EFFECT_PRESET_SHOW = "preset_show %s"
EFFECT_CONNECT = "connect %s %s"
EFFECT_DISCONNECT = "disconnect %s %s"
EFFECT_DISCONNECT_ALL = "disconnect_all %s"
EFFECT_BYPASS = "bypass %i %i"
EFFECT_PARAM_SET = "param_set %i %s %s"
EFFECT_PARAM_GET = "param_get %i %s"
EFFECT_PARAM_MON = "param_monitor %i %s %s %f"
EFFECT_PARAMS_FLUSH = "params_flush %i %i %i ..."
EFFECT_PATCH_GET = "patch_get %i %s"
EFFECT_PATCH_SET = "patch_set %i %s %s"
EFFECT_LICENSEE = "licensee %i"
EFFECT_SET_BPM = "set_bpm %f"
EFFECT_SET_BPB = "set_bpb %f"
MONITOR_ADDR_SET = "monitor %s %i %i"
MONITOR_OUTPUT = "monitor_output %i %s"
MONITOR_OUTPUT_OFF = "monitor_output_off %i %s"
MONITOR_AUDIO_LEVELS = "monitor_audio_levels %i %s"
MONITOR_MIDI_PROGRAM = "monitor_midi_program %i %i"
MIDI_LEARN = "midi_learn %i %s %f %f"
MIDI_MAP = "midi_map %i %s %i %i %f %f"
MIDI_UNMAP = "midi_unmap %i %s"
CC_MAP = "cc_map %i %s %i %i %s %f %f %f %i %i %s %i ..."
CC_VALUE_SET = "cc_value_set %i %s %f"
CC_UNMAP = "cc_unmap %i %s"
CV_MAP = "cv_map %i %s %s %f %f %s"
CV_UNMAP = "cv_unmap %i %s"
HMI_MAP = "hmi_map %i %s %i %i %i %i %i %s %f %f %i"
HMI_UNMAP = "hmi_unmap %i %s"
CPU_LOAD = "cpu_load"
MAX_CPU_LOAD = "max_cpu_load"
LOAD_COMMANDS = "load %s"
SAVE_COMMANDS = "save %s"
BUNDLE_ADD = "bundle_add %s"
BUNDLE_REMOVE = "bundle_remove %s %s"
STATE_LOAD = "state_load %s"
STATE_SAVE = "state_save %s"
STATE_TMPDIR = "state_tmpdir %s"
FEATURE_ENABLE = "feature_enable %s %i"
TRANSPORT = "transport %i %f %f"
TRANSPORT_SYNC = "transport_sync %s"
SHOW_EXTERNAL_UI = "show_external_ui %i"
OUTPUT_DATA_READY = "output_data_ready"
HELP = "help"
QUIT = "quit"

_VARIADIC = "..."

_WORD = re.compile(r'(?:"(?:[^"]|"")*(?:"|$)|[^ \t\r\n"]+)+')
_PART = re.compile(r'"((?:[^"]|"")*)(?:"|$)|([^ \t\r\n"]+)')


def split_words(text: str) -> list[str]:
    """Split ``text`` on blanks; double quotes group words, ``""`` inside quotes is a quote."""
    words = []
    for word in _WORD.finditer(text):
        parts = []
        for part in _PART.finditer(word.group(0)):
            quoted, plain = part.group(1), part.group(2)
            parts.append(plain if plain is not None else quoted.replace('""', '"'))
        words.append("".join(parts))
    return words


@dataclass
class Request:
    """A parsed message handed to a command callback."""

    words: list[str]
    response: Optional[str] = None

    def respond(self, response: str) -> None:
        self.response = response

    def respond_int(self, value: int) -> None:
        self.response = f"resp {int(value)}"


Callback = Callable[[Request], None]


@dataclass
class _Command:
    template: str
    words: list[str]
    callback: Optional[Callback]


@dataclass
class Protocol:
    """Registry of command templates that dispatches incoming messages.

    ``send(sender_id, payload)`` receives each reply as bytes ending in NUL.
    """

    send: Optional[Callable[[int, bytes], object]] = None
    verbose: bool = False
    _commands: list[_Command] = field(default_factory=list, init=False, repr=False)

    def add_command(self, command: str, callback: Optional[Callback]) -> None:
        """Register a command template; raises RuntimeError when the table is full."""
        if len(self._commands) >= PROTOCOL_MAX_COMMANDS:
            raise RuntimeError("PROTOCOL_MAX_COMMANDS reached")
        self._commands.append(_Command(command, split_words(command), callback))

    def remove_commands(self) -> None:
        self._commands.clear()

    def _lookup(self, words: list[str]) -> _Command | str:
        """The matching command, or the error message to reply with."""
        for command in self._commands:
            template = command.words
            matched = 0
            variadic = False
            compared = 0
            for expected, received in zip(template, words):
                compared += 1
                if expected == received:
                    matched += 1
                elif matched > 0:
                    if "%" in expected:
                        matched += 1
                    elif expected == _VARIADIC:
                        matched += 1
                        variadic = True

            if matched == 0:
                continue

            if compared < len(template) and template[compared] == _VARIADIC:
                variadic = True

            if len(words) < len(template) - int(variadic):
                return MESSAGE_FEW_ARGUMENTS
            if len(words) > len(template) and not variadic:
                return MESSAGE_MANY_ARGUMENTS
            if matched == len(words) or variadic:
                return command
            return MESSAGE_COMMAND_NOT_FOUND
        return MESSAGE_COMMAND_NOT_FOUND

    def _reply(self, sender_id: int, text: str) -> None:
        if self.send is not None:
            self.send(sender_id, text.encode() + b"\0")

    def parse(self, data: str, sender_id: int = 0) -> Optional[str]:
        """Dispatch one message and return the reply sent, if any."""
        words = split_words(data)

        if self.verbose:
            quoted = "".join(f" '{word}'" for word in words[1:])
            print(f"PROTOCOL: received '{data}'{quoted}")

        if not words:
            return None

        found = self._lookup(words)
        if isinstance(found, str):
            self._reply(sender_id, found)
            if self.verbose:
                print(f"PROTOCOL: error '{found}'")
            return found

        if found.callback is None:
            return None
        request = Request(words)
        found.callback(request)
        if request.response is None:
            return None
        self._reply(sender_id, request.response)
        if self.verbose:
            print(f"PROTOCOL: response '{request.response}'")
        return request.response