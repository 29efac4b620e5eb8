import io

from cfddns.pp import Emoji, MessageID, PrettyPrinter, Verbosity
from cfddns.queued import QueuedPrinter


class RecordingPrinter:
    def __init__(self, name, log, inner=None):
        self.name = name
        self.log = log
        self.inner = inner

    def is_showing(self, verbosity):
        self.log.append((self.name, "is_showing", verbosity))
        return True

    def indent(self):
        self.log.append((self.name, "indent"))
        return self.inner

    def blank_line_if_verbose(self):
        self.log.append((self.name, "blank_line_if_verbose"))

    def info(self, emoji, message):
        self.log.append((self.name, "info", emoji, message))

    def notice(self, emoji, message):
        self.log.append((self.name, "notice", emoji, message))

    def suppress(self, message_id):
        self.log.append((self.name, "suppress", message_id))

    def info_once(self, message_id, emoji, message):
        self.log.append((self.name, "info_once", message_id, emoji, message))

    def notice_once(self, message_id, emoji, message):
        self.log.append((self.name, "notice_once", message_id, emoji, message))


def test_flushed_calls_in_order():
    log = []
    inner = RecordingPrinter("inner", log)
    outer = RecordingPrinter("outer", log, inner)
    queued = QueuedPrinter(outer)

    printer = queued
    showing = printer.is_showing(Verbosity.INFO)
    assert showing is True
    if showing:
        printer.info(Emoji.BULLET, "Test")
        printer = printer.indent()
    assert isinstance(printer, QueuedPrinter)
    printer.notice(Emoji.NOTIFY, "some message")
    printer.suppress(MessageID.DETECTION_TIMEOUTS)
    printer.blank_line_if_verbose()
    printer.info_once(MessageID.IP6_DETECTION_FAILS, Emoji.HINT, "cannot do IPv6")
    printer.notice_once(MessageID.IP4_DETECTION_FAILS, Emoji.HINT, "cannot do IPv4")

    assert log == [
        ("outer", "is_showing", Verbosity.INFO),
        ("outer", "indent"),
    ]

    queued.flush()

    assert log[2:] == [
        ("outer", "info", Emoji.BULLET, "Test"),
        ("inner", "notice", Emoji.NOTIFY, "some message"),
        ("inner", "suppress", MessageID.DETECTION_TIMEOUTS),
        ("inner", "blank_line_if_verbose"),
        ("inner", "info_once", MessageID.IP6_DETECTION_FAILS, Emoji.HINT, "cannot do IPv6"),
        ("inner", "notice_once", MessageID.IP4_DETECTION_FAILS, Emoji.HINT, "cannot do IPv4"),
    ]


def test_nothing_printed_before_flush():
    buf = io.StringIO()
    queued = QueuedPrinter(PrettyPrinter(buf, True, Verbosity.INFO))
    queued.info(Emoji.STAR, "one")
    queued.indent().notice(Emoji.STAR, "two")
    assert buf.getvalue() == ""
    queued.flush()
    assert buf.getvalue() == "🌟 one\n   🌟 two\n"


def test_flush_empties_queue():
    buf = io.StringIO()
    queued = QueuedPrinter(PrettyPrinter(buf, False, Verbosity.INFO))
    queued.notice(Emoji.STAR, "once")
    queued.flush()
    queued.flush()
    assert buf.getvalue() == "once\n"


def test_is_showing_delegates_immediately():
    queued = QueuedPrinter(PrettyPrinter(io.StringIO(), True, Verbosity.NOTICE))
    assert queued.is_showing(Verbosity.NOTICE) is True
    assert queued.is_showing(Verbosity.INFO) is False


def test_suppress_applies_in_queue_order():
    buf = io.StringIO()
    queued = QueuedPrinter(PrettyPrinter(buf, True, Verbosity.INFO))
    queued.notice_once(MessageID.UPDATE_TIMEOUTS, Emoji.HINT, "shown")
    queued.suppress(MessageID.RECORD_PERMISSION)
    queued.notice_once(MessageID.RECORD_PERMISSION, Emoji.HINT, "hidden")
    queued.flush()
    assert buf.getvalue() == "💡 shown\n"