"""
tokenhost.events — the notification sink the core writes to.

Events are appended during a call and become visible only if the call
commits; a reverted call truncates the sink back to where it started.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .errors import HostError

# Basic bounds
MAX_EVENT_NAME_BYTES = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

# Keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Event:
    """An emitted notification."""

    name: bytes
    args: Dict[str, Any]


def _invalid(message: str, **context: Any) -> HostError:
    return HostError(message, code="EVENT_INVALID", data=context or None)


class EventSink:
    """
    Append-only event log with mark/rollback support.

    `limit` caps the number of events a single call may append.
    """

    def __init__(self, *, limit: Optional[int] = None) -> None:
        self._events: List[Event] = []
        self._marks: List[int] = []
        self._limit = limit

    # --- Validation helpers -------------------------------------------------

    @staticmethod
    def _check_name(name: Any) -> bytes:
        if not isinstance(name, (bytes, bytearray)):
            raise _invalid("event name must be bytes", where="name_type")
        b = bytes(name)
        if not b:
            raise _invalid("event name must be non-empty", where="name_empty")
        if len(b) > MAX_EVENT_NAME_BYTES:
            raise _invalid("event name too long", where="name_length", len=len(b))
        return b

    @staticmethod
    def _check_key(key: Any) -> str:
        if not isinstance(key, str) or not key:
            raise _invalid("event key must be a non-empty str", where="key_type")
        if len(key) > MAX_KEY_LEN or not _KEY_RE.match(key):
            raise _invalid("event key has invalid characters", where="key_grammar", key=key)
        return key

    @staticmethod
    def _check_value(value: Any) -> Any:
        if isinstance(value, (bytes, bytearray)):
            b = bytes(value)
            if len(b) > MAX_BYTES_LEN:
                raise _invalid("event bytes arg too long", where="value_bytes_length", len=len(b))
            return b
        if isinstance(value, bool):
            # bool is a subclass of int, so check it before int.
            return value
        if isinstance(value, int):
            if value.bit_length() > MAX_INT_BITS:
                raise _invalid("event int arg out of range", where="value_int_bits", bits=value.bit_length())
            return int(value)
        raise _invalid("unsupported event arg type", where="value_type", py_type=type(value).__name__)

    # --- Core sink operations -----------------------------------------------

    def emit(self, name: bytes, args: Mapping[str, Any]) -> Event:
        bname = self._check_name(name)
        if not isinstance(args, Mapping):
            raise _invalid("event args must be a mapping", where="args_type")
        if self._limit is not None and self._marks and len(self._events) - self._marks[-1] >= self._limit:
            raise _invalid("too many events in one call", where="limit", limit=self._limit)
        checked = {self._check_key(k): self._check_value(v) for k, v in args.items()}
        ev = Event(bname, checked)
        self._events.append(ev)
        return ev

    def mark(self) -> None:
        self._marks.append(len(self._events))

    def release(self) -> None:
        """Keep everything appended since the last mark."""
        self._marks.pop()

    def rollback(self) -> None:
        """Drop everything appended since the last mark."""
        del self._events[self._marks.pop():]

    def clear(self) -> None:
        self._events.clear()
        self._marks.clear()

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "Event",
    "EventSink",
    "MAX_EVENT_NAME_BYTES",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
