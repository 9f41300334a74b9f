"""Exception types for the chunking engine."""


class CodesplitError(Exception):
    """Base exception for codesplit errors."""

    pass


class GrammarLoadError(CodesplitError):
    """A tree-sitter grammar package could not be imported or loaded."""

    pass


class ParserPoolError(CodesplitError):
    """Base exception for parser pool errors."""

    pass


class PoolExhaustedError(ParserPoolError):
    """No parser became available before the acquire timeout elapsed.

    Raised to the caller as a resource-unavailable condition, never turned
    into a fallback split.
    """

    pass


class PoolClosedError(ParserPoolError):
    """The pool was destroyed while (or before) a caller tried to acquire."""

    pass


class TreeDisposedError(CodesplitError):
    """A syntax tree was accessed after it had been disposed."""

    pass


class SplitterDisposedError(CodesplitError):
    """A splitter was used after dispose() was called."""

    pass
