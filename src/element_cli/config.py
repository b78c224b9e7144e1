"""
Runtime configuration

Resolves registry connection settings from environment variables, with
explicit values (e.g. CLI options) taking precedence.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

BLOCK_SETTINGS_FILE = ".blocksettings"
BUILT_FILE_PATH = "dist/main.js"

DEFAULT_REGISTRY_URL = "http://localhost:3000/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_GIT_REMOTE = "origin"

ENV_REGISTRY_URL = "ELEMENT_REGISTRY_URL"
ENV_TOKEN = "ELEMENT_TOKEN"
ENV_TIMEOUT = "ELEMENT_TIMEOUT"
ENV_GIT_REMOTE = "ELEMENT_GIT_REMOTE"


class ElementConfig(BaseModel):
    """Connection and workspace layout settings"""

    registry_url: str = DEFAULT_REGISTRY_URL
    token: str | None = None
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    git_remote: str = DEFAULT_GIT_REMOTE
    settings_file: str = BLOCK_SETTINGS_FILE
    built_file: str = BUILT_FILE_PATH

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: object,
    ) -> "ElementConfig":
        """Build config from environment variables plus non-None overrides

        Args:
            environ: Environment mapping (defaults to ``os.environ``)
            **overrides: Explicit values; ``None`` entries are ignored

        Raises:
            pydantic.ValidationError: If a value is malformed (e.g. non-numeric timeout)
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get(ENV_REGISTRY_URL):
            values["registry_url"] = env[ENV_REGISTRY_URL]
        if env.get(ENV_TOKEN):
            values["token"] = env[ENV_TOKEN]
        if env.get(ENV_TIMEOUT):
            values["timeout_seconds"] = env[ENV_TIMEOUT]
        if env.get(ENV_GIT_REMOTE):
            values["git_remote"] = env[ENV_GIT_REMOTE]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
