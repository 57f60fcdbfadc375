# src/pocket_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations,
so storage backends stay swappable and tests can use in-memory fakes.
"""

from typing import Awaitable, Callable, Protocol

StateListener = Callable[[], None]
# Called after every state change; the listener re-reads state itself.


class KeyValueStore(Protocol):
    """
    Durable string -> string store (AsyncStorage-style).

    Values are opaque text blobs; the caller owns serialization.
    """

    def get_item(self, key: str) -> Awaitable[str | None]: ...
    def set_item(self, key: str, value: str) -> Awaitable[None]: ...
    def remove_item(self, key: str) -> Awaitable[None]: ...
