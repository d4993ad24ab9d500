"""Fake ConfigObserver for use in tests — records events without mocking."""


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[dict[str, str]] = []
        self.warnings: list[dict[str, str]] = []

    def config_loaded(self, name: str, version: str) -> None:
        self.loaded.append({"name": name, "version": version})

    def config_keep_workdirs_warning(self, temp_base_dir: str) -> None:
        self.warnings.append({"temp_base_dir": temp_base_dir})
