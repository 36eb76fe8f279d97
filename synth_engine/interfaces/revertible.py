"""Revertible protocol — state that can be captured and rolled back."""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Revertible(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...
