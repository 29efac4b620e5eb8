"""Pretty-printing of updater messages with emojis, indentation and verbosity."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, MutableSet
from enum import Enum, IntEnum
from typing import Protocol


class _Writer(Protocol):
    def write(self, text: str) -> object: ...


class Verbosity(IntEnum):
    """Message levels; a higher level means more verbose."""

    NOTICE = 0
    INFO = 1
    QUIET = 0
    VERBOSE = 1
    DEFAULT = 1


class Emoji(str, Enum):
    """Emojis prefixed to printed messages."""

    STAR = "🌟"
    BULLET = "🔸"

    ENV_VARS = "📖"
    CONFIG = "🔧"
    INTERNET = "🌐"
    MUTE = "🔇"
    DISABLED = "🚫"
    EXPERIMENTAL = "🧪"
    SWITCH = "🔀"

    CREATION = "🐣"
    DELETION = "💀"
    UPDATE = "📡"
    CLEAR = "🧹"

    PING = "🔔"
    NOTIFY = "📣"

    TIMEOUT = "⌛"
    SIGNAL = "🚨"
    ALREADY_DONE = "🤷"
    NOW = "🏃"
    ALARM = "⏰"
    BYE = "👋"

    GOOD = "😊"
    USER_ERROR = "😡"
    USER_WARNING = "😦"
    ERROR = "😞"
    WARNING = "😐"
    IMPOSSIBLE = "🤯"
    HINT = "💡"

    def __str__(self) -> str:
        return self.value


class MessageID(IntEnum):
    """Identifiers of messages that should be shown at most once."""

    UPDATE_DOCKER_TEMPLATE = 0
    AUTH_TOKEN_NEW_PREFIX = 1
    IP4_DETECTION_FAILS = 2
    IP6_DETECTION_FAILS = 3
    IP4_MAPPED_IP6_ADDRESS = 4
    DETECTION_TIMEOUTS = 5
    UPDATE_TIMEOUTS = 6
    RECORD_PERMISSION = 7
    WAF_LIST_PERMISSION = 8
    EXPERIMENTAL_SHOUTRRR = 9
    EXPERIMENTAL_WAF = 10
    EXPERIMENTAL_LOCAL_WITH_INTERFACE = 11
    UNDOCUMENTED_DEBUG_CONST_PROVIDER = 12
    UNDOCUMENTED_CUSTOM_CLOUDFLARE_TRACE_PROVIDER = 13


ISSUE_REPORTING_URL = "https://github.com/favonia/cloudflare-ddns/issues/new"
MANUAL_URL = "https://github.com/favonia/cloudflare-ddns/blob/main/README.markdown"

# Wider than an emoji for visually pleasing results.
INDENT_PREFIX = "   "


class PrettyPrinter:
    """Writes messages to a text stream, honouring verbosity and indentation.

    Printers derived through :meth:`indent` share the writer and the record
    of messages already shown.
    """

    def __init__(self, writer: _Writer, emoji: bool, verbosity: Verbosity) -> None:
        self._writer = writer
        self._emoji = emoji
        self._verbosity = verbosity
        self._indent = 0
        self._shown: MutableSet[Hashable] = set()

    def is_showing(self, verbosity: Verbosity) -> bool:
        """Tell whether messages of the given level are printed."""
        return self._verbosity >= verbosity

    def indent(self) -> PrettyPrinter:
        """Return a printer that indents one level more than this one."""
        child = PrettyPrinter(self._writer, self._emoji, self._verbosity)
        child._indent = self._indent + 1
        child._shown = self._shown
        return child

    def blank_line_if_verbose(self) -> None:
        """Print a blank line at the verbose level."""
        if self.is_showing(Verbosity.VERBOSE):
            self._writer.write("\n")

    def _output(self, verbosity: Verbosity, emoji: Emoji | str, message: str) -> None:
        if not self.is_showing(verbosity):
            return
        prefix = INDENT_PREFIX * self._indent
        line = f"{prefix}{emoji} {message}" if self._emoji else f"{prefix}{message}"
        if line.endswith("\n"):
            line = line[:-1]
        self._writer.write(line + "\n")

    def info(self, emoji: Emoji | str, message: str) -> None:
        """Print a message at the info level."""
        self._output(Verbosity.INFO, emoji, message)

    def notice(self, emoji: Emoji | str, message: str) -> None:
        """Print a message at the notice level."""
        self._output(Verbosity.NOTICE, emoji, message)

    def suppress(self, message_id: Hashable) -> None:
        """Suppress all future once-only messages with this identifier."""
        self._shown.add(message_id)

    def info_once(self, message_id: Hashable, emoji: Emoji | str, message: str) -> None:
        """Print an info message unless its identifier was already used."""
        if message_id not in self._shown:
            self.info(emoji, message)
            self._shown.add(message_id)

    def notice_once(self, message_id: Hashable, emoji: Emoji | str, message: str) -> None:
        """Print a notice unless its identifier was already used."""
        if message_id not in self._shown:
            self.notice(emoji, message)
            self._shown.add(message_id)


def new_default(writer: _Writer) -> PrettyPrinter:
    """Create a printer with emojis and the default verbosity."""
    return PrettyPrinter(writer, True, Verbosity.DEFAULT)


def join(items: Iterable[str]) -> str:
    """Join words with commas, or return "(none)" when there are none."""
    items = list(items)
    if not items:
        return "(none)"
    return ", ".join(items)


def english_join(items: Iterable[str]) -> str:
    """Join words as in English, with an Oxford comma."""
    items = list(items)
    if not items:
        return "(none)"
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"