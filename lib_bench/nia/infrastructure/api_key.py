"""Locating the Nia API key the setup phase and the agent share."""

import os
from collections.abc import Mapping
from pathlib import Path

from lib_bench.nia.infrastructure.errors import NiaApiKeyError

API_KEY_ENV_VAR = "NIA_API_KEY"
BASE_URL_ENV_VAR = "NIA_BASE_URL"


def resolve_api_key(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> str:
    """
    Return the key from ``NIA_API_KEY``, else from ``~/.config/nia/api_key``.

    Surrounding whitespace is stripped; an empty value counts as missing.

    Raises:
        NiaApiKeyError: if neither source holds a key.
    """
    environ = os.environ if environ is None else environ
    env_key = environ.get(API_KEY_ENV_VAR, "").strip()
    if env_key:
        return env_key

    key_file = (home or Path.home()) / ".config" / "nia" / "api_key"
    try:
        file_key = key_file.read_text(encoding="utf-8").strip()
    except OSError:
        file_key = ""
    if file_key:
        return file_key
    raise NiaApiKeyError()


def agent_env(api_key: str, base_url: str) -> dict[str, str]:
    """Variables the Nia skill expects in the agent's environment."""
    return {API_KEY_ENV_VAR: api_key, BASE_URL_ENV_VAR: base_url}
