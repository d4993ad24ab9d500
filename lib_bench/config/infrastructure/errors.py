"""Error types raised while turning a bench YAML file into a BenchConfig."""

from pathlib import Path

from lib_bench.core.errors import LibBenchError


class ConfigLoadError(LibBenchError):
    """The bench file could not be read at all."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config {path}: {reason}")


class MissingEnvVarsError(LibBenchError):
    """``${VAR}`` references without a ``:-default`` whose variable is unset.

    Every unset name is collected before raising, so one run of the CLI
    reports all of them.
    """

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = sorted(missing_vars)
        super().__init__(
            "Failed to load config: missing environment variables: "
            + ", ".join(self.missing_vars)
        )


class ConfigValidationError(LibBenchError):
    """The bench file parsed but does not describe a runnable benchmark."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to validate config: {reason}")


class MissingTemplatesError(ConfigValidationError):
    """One or more conditions point at an agent config template that does not exist."""

    def __init__(self, templates: dict[str, Path]) -> None:
        self.templates = templates
        super().__init__(
            "; ".join(
                f"condition '{name}' template not found: {path}"
                for name, path in templates.items()
            )
        )


class UnknownConditionError(ConfigValidationError):
    """A condition was selected for the run that the bench file does not define."""

    def __init__(self, unknown: list[str], configured: list[str]) -> None:
        self.unknown = unknown
        self.configured = sorted(configured)
        super().__init__(
            f"unknown condition(s): {', '.join(unknown)}"
            f" (configured: {', '.join(self.configured)})"
        )
