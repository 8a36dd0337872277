"""
tokencore.hooks — transfer lifecycle callbacks.

The ledger calls ``before_token_transfer`` before and ``after_token_transfer``
after every balance movement, including mint (``sender`` is the zero account)
and burn (``recipient`` is the zero account). Hooks run inside the same call,
so anything a hook raises rolls the whole operation back.

Hooks are injected into the Ledger at construction; the default does nothing.
"""

from __future__ import annotations

from typing import List, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TransferHooks(Protocol):
    def before_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None: ...
    def after_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None: ...


class NoopHooks:
    def before_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        return None

    def after_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        return None


class RecordingHooks:
    """Keeps every callback as ("before" | "after", sender, recipient, amount)."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, bytes, bytes, int]] = []

    def before_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        self.calls.append(("before", sender, recipient, amount))

    def after_token_transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        self.calls.append(("after", sender, recipient, amount))


__all__ = ["TransferHooks", "NoopHooks", "RecordingHooks"]
