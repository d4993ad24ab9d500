"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, name: str, version: str) -> None:
        self._log.info("config.loaded", name=name, version=version)

    def config_keep_workdirs_warning(self, temp_base_dir: str) -> None:
        self._log.warning(
            "config.keep_workdirs_warning",
            temp_base_dir=temp_base_dir,
            message="Sandboxes and working directories will not be removed",
        )
