"""Run-to-completion execution environment.

The Ledger groups the stateful components (tokens, venues) that a swap can
touch and gives callers all-or-nothing semantics over them: atomic()
snapshots every component on entry and restores every snapshot if the
block raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from swaprouter.chain.base import StatefulComponent

logger = structlog.get_logger()


class Ledger:
    """Set of stateful components with transactional rollback."""

    def __init__(self, components: Iterable[StatefulComponent] | None = None) -> None:
        self._components: list[StatefulComponent] = []
        if components:
            for component in components:
                self.register(component)

    def register(self, component: StatefulComponent) -> None:
        """Track a component. Registering the same object twice is a no-op."""
        if not isinstance(component, StatefulComponent):
            raise TypeError(f"{type(component).__name__} cannot be snapshotted")
        if any(existing is component for existing in self._components):
            return
        self._components.append(component)

    def track(self, component: object) -> bool:
        """Register component if it supports snapshots. Returns whether it is tracked."""
        if not isinstance(component, StatefulComponent):
            return False
        self.register(component)
        return True

    @property
    def component_count(self) -> int:
        return len(self._components)

    def snapshot(self) -> list[tuple[StatefulComponent, Any]]:
        return [(component, component.snapshot()) for component in self._components]

    def restore(self, snapshot: list[tuple[StatefulComponent, Any]]) -> None:
        for component, state in reversed(snapshot):
            component.restore(state)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block so that either all of its effects commit or none do.

        Rolls back on any BaseException, KeyboardInterrupt included.
        """
        snapshot = self.snapshot()
        try:
            yield
        except BaseException as e:
            self.restore(snapshot)
            logger.info("ledger_rolled_back", reason=type(e).__name__)
            raise


__all__ = ["Ledger"]
