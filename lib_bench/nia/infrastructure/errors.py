"""Error types raised by Nia infrastructure."""

from lib_bench.core.errors import LibBenchError


class NiaApiKeyError(LibBenchError):
    """No API key in the environment or the user's Nia config file."""

    def __init__(self) -> None:
        super().__init__(
            "Failed to resolve Nia API key: set NIA_API_KEY or write the key"
            " to ~/.config/nia/api_key"
        )


class NiaApiError(LibBenchError):
    """The Nia API answered with an error status or an unusable body."""

    def __init__(self, method: str, path: str, reason: str) -> None:
        self.method = method
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to call Nia API {method} {path}: {reason}")
