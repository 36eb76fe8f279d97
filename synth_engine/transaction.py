"""All-or-nothing operation scope."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator

from .interfaces.revertible import Revertible

logger = logging.getLogger(__name__)


class RevertScope:
    """Compensating actions registered while an ``atomic()`` block runs.

    Collaborators that cannot snapshot themselves get an explicit inverse
    call instead (return pulled collateral, re-mint burned supply). Actions
    run newest first when the block fails.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self._actions: list[tuple[str, Callable[[], Any]]] = []

    def on_revert(self, description: str, action: Callable[[], Any]) -> None:
        self._actions.append((description, action))

    def unwind(self) -> None:
        for description, action in reversed(self._actions):
            try:
                ok = action()
            except Exception as e:
                logger.error(
                    "%s: compensating %s raised: %s", self.operation, description, e
                )
                continue
            if ok is False:
                logger.error(
                    "%s: compensating %s was refused", self.operation, description
                )
        self._actions.clear()


@contextmanager
def atomic(operation: str, stores: Iterable[Any]) -> Iterator[RevertScope]:
    """Snapshot every revertible store, restore all of them on any exception.

    Stores that do not implement ``Revertible`` (read-only price sources,
    remote collaborators) are skipped; effects on those are undone through
    the compensating actions registered on the yielded ``RevertScope``.
    Nested scopes each keep their own state, so a failed reentrant call only
    unwinds its own effects.
    """
    snapshots = [
        (store, store.snapshot()) for store in stores if isinstance(store, Revertible)
    ]
    scope = RevertScope(operation)
    try:
        yield scope
    except BaseException as e:
        scope.unwind()
        for store, state in reversed(snapshots):
            store.restore(state)
        logger.warning("%s reverted: %s", operation, e)
        raise
