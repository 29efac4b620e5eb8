# cfddns

Building blocks for a dynamic DNS updater:

- a pretty printer for console output (`cfddns.pp`) and a queueing
  wrapper around it (`cfddns.queued`);
- dead man's switch monitors: the interfaces and composition
  (`cfddns.monitor`), Healthchecks (`cfddns.healthchecks`) and
  Uptime Kuma (`cfddns.uptimekuma`);
- the notifier interface, messages and composition (`cfddns.notifier`);
- a setter that reconciles DNS records and WAF lists with detected
  IP addresses through an API handle (`cfddns.setter`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Pretty printing

`cfddns.pp.PrettyPrinter(writer, emoji, verbosity)` writes one line per
message to any object with a `write` method. Each line is prefixed by three
spaces per indentation level and, when `emoji` is true, by the emoji and a
space. Messages are printed only when the printer's verbosity is at least
the message's level (`Verbosity.NOTICE` < `Verbosity.INFO`).

```python
import sys
from cfddns.pp import PrettyPrinter, Emoji, Verbosity, MessageID, english_join

ppfmt = PrettyPrinter(sys.stdout, True, Verbosity.INFO)
ppfmt.notice(Emoji.STAR, "Starting")
inner = ppfmt.indent()
inner.info(Emoji.BULLET, "Providers: " + english_join(["ipify", "local"]))
ppfmt.notice_once(MessageID.DETECTION_TIMEOUTS, Emoji.HINT, "Shown only once")
ppfmt.blank_line_if_verbose()
```

- `indent()` returns a printer one level deeper that shares the writer and
  the record of messages already shown.
- `info_once` / `notice_once` print a message only the first time its
  identifier is used; `suppress(message_id)` marks it as shown in advance.
- `new_default(writer)` creates a printer with emojis at the default
  (verbose) level.
- `join(items)` joins with commas; `english_join(items)` joins as in
  English with an Oxford comma (`"a, b, and c"`). Both return `"(none)"`
  for an empty list.

`cfddns.queued.QueuedPrinter(upstream)` queues every printing call to an
upstream printer and replays them in order on `flush()`. `is_showing` is
answered at once, and `indent()` returns a queued printer over the indented
upstream that shares the same queue.

## Monitors

`cfddns.monitor.Message(ok, lines)` is a frozen message with a
success/failure status; `Message.single(ok, line)` makes a one-line message,
`format()` joins the lines with newlines, and `merge_messages(*msgs)` keeps
only the lines of the most severe status.

`BasicMonitor` provides `describe()` and `ping(ppfmt, message)`; `Monitor`
adds `start`, `exit` and `log`. `Composed(*monitors)` drops `None`,
flattens nested `Composed` values and calls each member in turn, stopping
at the first failure. `Composed.log` forwards failing messages as pings to
members that only support `ping`.

```python
from cfddns.monitor import Composed, Message
from cfddns.healthchecks import new_healthchecks
from cfddns.uptimekuma import new_uptime_kuma

hc = new_healthchecks(ppfmt, "https://hc.example.com/ping/placeholder")
kuma = new_uptime_kuma(ppfmt, "https://kuma.example.com/api/push/placeholder?status=up&msg=OK&ping=")
monitors = Composed(hc, kuma)
monitors.start(ppfmt, "Starting")
monitors.ping(ppfmt, Message.single(True, "Updated"))
monitors.exit(ppfmt, "Bye")
```

- `new_healthchecks(ppfmt, raw_url)` accepts absolute `http`/`https` URLs
  with a host and no query, and raises `ValueError` otherwise. `Healthchecks`
  POSTs the message to the base URL (success), `/fail`, `/start`, `/0` or
  `/log`, and counts a ping as successful only on status 200 with the body
  `OK`. `log` with an empty successful message sends nothing.
- `new_uptime_kuma(ppfmt, raw_url)` accepts absolute `http`/`https` URLs
  with a host, warns about query parameters other than
  `status=up`, `msg=OK` and `ping=`, drops the query, and raises
  `ValueError` on unusable URLs. `UptimeKuma.ping` sends a GET with
  `status=up&msg=OK` on success, or `status=down` with the formatted
  message (or `Failing` if it is empty) on failure, and expects a JSON
  reply with `"ok": true`.

Both wait at most 10 seconds per ping, retrying on connection errors,
status 429 and 5xx responses. Plain HTTP URLs produce a warning. URLs are
never echoed in messages; they are described as "(URL redacted)".

## Notifiers

`cfddns.notifier.Message` is a tuple of fragments; `format()` joins them
with spaces and `merge_messages(*msgs)` concatenates them in order.
`Notifier` is the abstract interface (`describe()`, `send(ppfmt, message)`)
and `Composed(*notifiers)` forwards a message to each member, stopping at
the first failure.

## Setting records

`cfddns.setter.Setter(handle)` keeps DNS records and WAF lists in line with
detected addresses. The handle methods it calls are listed in the module
docstring. IP networks are given as 4 or 6.

- `set(ppfmt, ip_network, domain, ip, expected_params, stop=None)` keeps
  one record with the target IP, otherwise updates a stale record or
  creates a new one, then deletes stale and duplicate records.
- `final_delete(ppfmt, ip_network, domain, expected_params, stop=None)`
  deletes all listed records.
- `set_waf_list(ppfmt, waf_list, list_description, detected, item_comment)`
  keeps only list items covering the detected IPs and adds a /32 (IPv4) or
  /64 (IPv6) item where needed; mapping a network to `None` keeps its
  existing items.
- `final_clear_waf_list(ppfmt, waf_list, list_description)` deletes the
  list or starts clearing it.

`stop` is an optional `threading.Event`; once set, deletion loops give up
early. Each operation returns a `ResponseCode`: `NOOP`, `UPDATED`,
`UPDATING` or `FAILED`.

## What this package does not do

There is no command-line program and no update loop. The package does not
detect public IP addresses, does not include a DNS provider API client (the
setter needs a handle supplied by the caller), and has no concrete
notification service behind the `Notifier` interface.