"""Updating DNS records and WAF lists through an API handle.

Existing records are reused as much as possible; only when that fails are
new records created and stale ones removed.

The handle is any object providing:

- ``list_records(ppfmt, ip_network, domain, expected_params)`` returning
  ``(records, cached)`` or ``None`` on failure; records carry ``id``,
  ``ip`` and ``params``;
- ``update_record(ppfmt, ip_network, domain, record_id, ip, current_params,
  expected_params)`` returning success;
- ``create_record(ppfmt, ip_network, domain, ip, expected_params)``
  returning the new record ID or ``None``;
- ``delete_record(ppfmt, ip_network, domain, record_id, mode)`` returning
  success;
- ``list_waf_list_items(ppfmt, waf_list, list_description)`` returning
  ``(items, already_existing, cached)`` or ``None``; items carry ``id`` and
  ``prefix``;
- ``create_waf_list_items(ppfmt, waf_list, list_description, prefixes,
  item_comment)`` and ``delete_waf_list_items(ppfmt, waf_list,
  list_description, ids)`` returning success;
- ``final_clear_waf_list_async(ppfmt, waf_list, list_description)``
  returning ``(deleted, ok)``.

IP networks are given by IP version, 4 or 6.
"""

from __future__ import annotations

import ipaddress
import threading
from enum import Enum, IntEnum
from typing import Any

from cfddns.pp import Emoji

_RECORD_TYPES = {4: "A", 6: "AAAA"}
_WAF_LIST_MAX_BIT_LEN = {4: 32, 6: 64}
_ALL_IP_NETWORKS = (4, 6)


class ResponseCode(IntEnum):
    """The outcome of an update, enough to build monitor and notifier messages."""

    NOOP = 0
    UPDATED = 1
    UPDATING = 2
    FAILED = 3


class DeletionMode(Enum):
    """Why a record is being deleted."""

    REGULAR = "regular"
    FINAL = "final"


def _describe(obj: Any) -> str:
    describe = getattr(obj, "describe", None)
    return describe() if callable(describe) else str(obj)


def _stopped(stop: threading.Event | None) -> bool:
    return stop is not None and stop.is_set()


def _describe_prefix_or_ip(prefix: ipaddress.IPv4Network | ipaddress.IPv6Network) -> str:
    if prefix.prefixlen == prefix.max_prefixlen:
        return str(prefix.network_address)
    return str(prefix)


class Setter:
    """Updates DNS records and WAF lists using an API handle."""

    def __init__(self, handle: Any) -> None:
        self.handle = handle

    def _inconsistent(self, ppfmt: Any, record_type: str, domain_description: str) -> ResponseCode:
        ppfmt.notice(
            Emoji.ERROR,
            f"Failed to properly update {record_type} records of {domain_description}; "
            "records might be inconsistent",
        )
        return ResponseCode.FAILED

    def set(
        self,
        ppfmt: Any,
        ip_network: int,
        domain: Any,
        ip: ipaddress.IPv4Address | ipaddress.IPv6Address,
        expected_params: Any,
        stop: threading.Event | None = None,
    ) -> ResponseCode:
        """Make the records of ``domain`` point to ``ip`` and nothing else."""
        record_type = _RECORD_TYPES[ip_network]
        domain_description = _describe(domain)

        listing = self.handle.list_records(ppfmt, ip_network, domain, expected_params)
        if listing is None:
            return ResponseCode.FAILED
        records, cached = listing

        matched = [r for r in records if r.ip == ip]
        unmatched = [r for r in records if r.ip != ip]

        found = bool(matched)
        if found:
            matched = matched[1:]
            if not matched and not unmatched:
                suffix = " (cached)" if cached else ""
                ppfmt.info(
                    Emoji.ALREADY_DONE,
                    f"The {record_type} records of {domain_description} "
                    f"are already up to date{suffix}",
                )
                return ResponseCode.NOOP

        # Prefer recycling a stale record to keep its other attributes.
        if not found and unmatched:
            stale = unmatched[0]
            if not self.handle.update_record(
                ppfmt, ip_network, domain, stale.id, ip, stale.params, expected_params
            ):
                return self._inconsistent(ppfmt, record_type, domain_description)
            ppfmt.notice(
                Emoji.UPDATE,
                f"Updated a stale {record_type} record of {domain_description} (ID: {stale.id})",
            )
            found = True
            unmatched = unmatched[1:]

        if not found:
            record_id = self.handle.create_record(ppfmt, ip_network, domain, ip, expected_params)
            if record_id is None:
                return self._inconsistent(ppfmt, record_type, domain_description)
            ppfmt.notice(
                Emoji.CREATION,
                f"Added a new {record_type} record of {domain_description} (ID: {record_id})",
            )

        for r in unmatched:
            if not self.handle.delete_record(
                ppfmt, ip_network, domain, r.id, DeletionMode.REGULAR
            ):
                return self._inconsistent(ppfmt, record_type, domain_description)
            ppfmt.notice(
                Emoji.DELETION,
                f"Deleted a stale {record_type} record of {domain_description} (ID: {r.id})",
            )

        # Duplicates are up to date, so failing to delete them is tolerated.
        for r in matched:
            if self.handle.delete_record(ppfmt, ip_network, domain, r.id, DeletionMode.REGULAR):
                ppfmt.notice(
                    Emoji.DELETION,
                    f"Deleted a duplicate {record_type} record of {domain_description} "
                    f"(ID: {r.id})",
                )
            if _stopped(stop):
                return ResponseCode.UPDATED

        return ResponseCode.UPDATED

    def final_delete(
        self,
        ppfmt: Any,
        ip_network: int,
        domain: Any,
        expected_params: Any,
        stop: threading.Event | None = None,
    ) -> ResponseCode:
        """Delete all managed records of ``domain``."""
        record_type = _RECORD_TYPES[ip_network]
        domain_description = _describe(domain)

        listing = self.handle.list_records(ppfmt, ip_network, domain, expected_params)
        if listing is None:
            return ResponseCode.FAILED
        records, cached = listing

        ids = [r.id for r in records]
        if not ids:
            suffix = " (cached)" if cached else ""
            ppfmt.info(
                Emoji.ALREADY_DONE,
                f"The {record_type} records of {domain_description} were already deleted{suffix}",
            )
            return ResponseCode.NOOP

        all_ok = True
        for record_id in ids:
            if not self.handle.delete_record(
                ppfmt, ip_network, domain, record_id, DeletionMode.FINAL
            ):
                all_ok = False
                if _stopped(stop):
                    ppfmt.info(
                        Emoji.TIMEOUT,
                        f"Deletion of {record_type} records of {domain_description} aborted "
                        "by timeout or signals; records might be inconsistent",
                    )
                    return ResponseCode.FAILED
                continue
            ppfmt.notice(
                Emoji.DELETION,
                f"Deleted a stale {record_type} record of {domain_description} (ID: {record_id})",
            )

        if not all_ok:
            ppfmt.notice(
                Emoji.ERROR,
                f"Failed to properly delete {record_type} records of {domain_description}; "
                "records might be inconsistent",
            )
            return ResponseCode.FAILED
        return ResponseCode.UPDATED

    def set_waf_list(
        self,
        ppfmt: Any,
        waf_list: Any,
        list_description: str,
        detected: dict[int, Any],
        item_comment: str,
    ) -> ResponseCode:
        """Keep only list items covering detected IPs and add items where needed.

        A network mapped to ``None`` in ``detected`` means detection was
        attempted but failed; its existing items are then kept.
        """
        listing = self.handle.list_waf_list_items(ppfmt, waf_list, list_description)
        if listing is None:
            return ResponseCode.FAILED
        items, already_existing, cached = listing
        described = _describe(waf_list)
        if not already_existing:
            ppfmt.notice(Emoji.CREATION, f"Created a new list {described}")

        to_delete = []
        to_create = []
        for ip_net in _ALL_IP_NETWORKS:
            managed = ip_net in detected
            detected_ip = detected.get(ip_net)
            covered = False
            for item in items:
                if item.prefix.version != ip_net:
                    continue
                if detected_ip is not None and detected_ip in item.prefix:
                    covered = True
                elif managed and detected_ip is None:
                    pass
                else:
                    to_delete.append(item)
            if not covered and detected_ip is not None:
                bare = str(detected_ip).split("%")[0]
                to_create.append(
                    ipaddress.ip_network(
                        f"{bare}/{_WAF_LIST_MAX_BIT_LEN[ip_net]}", strict=False
                    )
                )

        if not to_create and not to_delete:
            suffix = " (cached)" if cached else ""
            ppfmt.info(Emoji.ALREADY_DONE, f"The list {described} is already up to date{suffix}")
            return ResponseCode.NOOP

        failure = f"Failed to properly update the list {described}; its content may be inconsistent"

        if not self.handle.create_waf_list_items(
            ppfmt, waf_list, list_description, to_create, item_comment
        ):
            ppfmt.notice(Emoji.ERROR, failure)
            return ResponseCode.FAILED
        for prefix in to_create:
            ppfmt.notice(
                Emoji.CREATION, f"Added {_describe_prefix_or_ip(prefix)} to the list {described}"
            )

        if not self.handle.delete_waf_list_items(
            ppfmt, waf_list, list_description, [item.id for item in to_delete]
        ):
            ppfmt.notice(Emoji.ERROR, failure)
            return ResponseCode.FAILED
        for item in to_delete:
            ppfmt.notice(
                Emoji.DELETION,
                f"Deleted {_describe_prefix_or_ip(item.prefix)} from the list {described}",
            )

        return ResponseCode.UPDATED

    def final_clear_waf_list(
        self, ppfmt: Any, waf_list: Any, list_description: str
    ) -> ResponseCode:
        """Delete the list, or start clearing it when it cannot be deleted."""
        deleted, ok = self.handle.final_clear_waf_list_async(ppfmt, waf_list, list_description)
        described = _describe(waf_list)
        if ok and deleted:
            ppfmt.notice(Emoji.DELETION, f"The list {described} was deleted")
            return ResponseCode.UPDATED
        if ok:
            ppfmt.notice(Emoji.CLEAR, f"The list {described} is being cleared (asynchronously)")
            return ResponseCode.UPDATING
        return ResponseCode.FAILED