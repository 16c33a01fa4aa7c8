"""
Transaction boundary shared by the services.

Repositories only add/flush; a service wraps each operation in
``uow.atomic()`` so either every staged change is committed or none is.
Blocks nest: only the outermost block commits. Callbacks registered with
``on_commit`` run after a successful commit and are dropped on rollback.
"""

import logging
from contextlib import contextmanager
from typing import Callable, List

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session):
        self.session = session
        self._depth = 0
        self._after_commit: List[Callable[[], None]] = []

    @contextmanager
    def atomic(self):
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self.commit()

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Defer a side effect until the enclosing transaction commits."""
        if self._depth == 0:
            callback()
        else:
            self._after_commit.append(callback)

    def commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.rollback()
            raise
        callbacks, self._after_commit = self._after_commit, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                # Data is already committed
                logger.error(
                    "After-commit callback failed",
                    extra={"context": {"error": str(e)}},
                    exc_info=True,
                )

    def rollback(self) -> None:
        self._after_commit = []
        self.session.rollback()
