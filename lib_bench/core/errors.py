"""Base exception class for all lib-bench-specific errors."""


class LibBenchError(Exception):
    """Base class for all lib-bench errors.

    Messages read "Failed to <action>: <reason>" so the CLI can print them as-is.
    """
