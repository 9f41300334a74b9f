"""
Bounded pool of reusable tree-sitter parsers.

A parser is lent to exactly one caller at a time. Entries are created eagerly
up to ``initial_size`` and lazily up to ``max_size``; once every entry is
checked out, further callers block until one is released.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Optional

from codesplit.core.errors import PoolClosedError, PoolExhaustedError

logger = logging.getLogger(__name__)


def _default_parser_factory() -> Any:
    import tree_sitter

    return tree_sitter.Parser()


def _reset_parser(parser: Any) -> None:
    parser.reset()


class ParserPool:
    """
    Thread-safe arena of parser entries with a fixed maximum size.

    Attributes:
        max_size: Hard cap on the number of entries ever alive at once
        acquire_timeout: Default wait limit for acquire() (None waits forever)
    """

    def __init__(
        self,
        factory: Optional[Callable[[], Any]] = None,
        initial_size: int = 3,
        max_size: int = 10,
        acquire_timeout: Optional[float] = None,
        reset: Optional[Callable[[Any], None]] = None,
    ):
        """
        Initialize the pool.

        Args:
            factory: Creates a new parser entry (default: tree_sitter.Parser)
            initial_size: Entries created up front, clamped to max_size
            max_size: Maximum number of entries
            acquire_timeout: Default timeout in seconds for acquire()
            reset: Clears parser state before an entry is reused
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")

        self._factory = factory or _default_parser_factory
        self._reset = reset or _reset_parser
        self._max_size = max_size
        self._acquire_timeout = acquire_timeout

        self._condition = threading.Condition()
        self._idle: list[Any] = []
        # Keyed by id() since parser objects are not guaranteed hashable
        self._in_use: dict[int, Any] = {}
        self._closed = False

        for _ in range(min(max(initial_size, 0), max_size)):
            self._idle.append(self._factory())

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def acquire_timeout(self) -> Optional[float]:
        return self._acquire_timeout

    @property
    def total(self) -> int:
        """Number of live entries, idle and checked out."""
        with self._condition:
            return len(self._idle) + len(self._in_use)

    @property
    def available(self) -> int:
        """Number of idle entries ready to be lent."""
        with self._condition:
            return len(self._idle)

    @property
    def in_use(self) -> int:
        """Number of entries currently checked out."""
        with self._condition:
            return len(self._in_use)

    @property
    def closed(self) -> bool:
        return self._closed

    def acquire(self, timeout: Optional[float] = None) -> Any:
        """
        Borrow a parser, waiting if every entry is checked out.

        Args:
            timeout: Seconds to wait; falls back to the pool default when None

        Returns:
            A parser owned by the caller until release()

        Raises:
            PoolExhaustedError: If the timeout elapses with no entry free
            PoolClosedError: If the pool is or becomes destroyed
        """
        if timeout is None:
            timeout = self._acquire_timeout
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._condition:
            while True:
                if self._closed:
                    raise PoolClosedError("Parser pool has been destroyed")

                if self._idle:
                    parser = self._idle.pop()
                    break

                if len(self._in_use) < self._max_size:
                    parser = self._factory()
                    logger.debug(
                        f"Parser pool grew to {len(self._in_use) + 1}/{self._max_size} entries"
                    )
                    break

                if deadline is None:
                    self._condition.wait()
                    continue

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PoolExhaustedError(
                        f"No parser available after {timeout}s "
                        f"({self._max_size} entries checked out)"
                    )
                self._condition.wait(remaining)

            self._in_use[id(parser)] = parser
            return parser

    def release(self, parser: Any) -> None:
        """
        Reset a parser and return it to the pool.

        A failing reset is logged and the entry is still returned.

        Raises:
            ValueError: If the parser is not currently checked out
        """
        with self._condition:
            if id(parser) not in self._in_use:
                raise ValueError("Parser is not currently checked out from this pool")

        try:
            self._reset(parser)
        except Exception as e:
            logger.warning(f"Failed to reset parser before returning it to the pool: {e}")

        with self._condition:
            self._in_use.pop(id(parser), None)
            if not self._closed:
                self._idle.append(parser)
            self._condition.notify()

    @contextmanager
    def lease(self, timeout: Optional[float] = None) -> Iterator[Any]:
        """Context manager that acquires a parser and always releases it."""
        parser = self.acquire(timeout)
        try:
            yield parser
        finally:
            self.release(parser)

    def destroy(self) -> None:
        """
        Drain the pool and wake every waiter.

        Entries still checked out are dropped when their holders release them.
        Calling destroy() more than once is a no-op.
        """
        with self._condition:
            if self._closed:
                return
            self._closed = True
            drained = self._idle
            self._idle = []
            self._condition.notify_all()

        for parser in drained:
            try:
                self._reset(parser)
            except Exception as e:
                logger.warning(f"Failed to reset parser during pool teardown: {e}")

        logger.debug(f"Parser pool destroyed ({len(drained)} entries released)")
