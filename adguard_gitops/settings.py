"""Connection settings, read from the environment (and a .env file)."""

import os
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from adguard_gitops.constants import DEFAULT_SCHEME, DEFAULT_TIMEOUT, MIN_TIMEOUT, MAX_TIMEOUT

ENV_HOST = "ADGUARD_HOST"
ENV_USERNAME = "ADGUARD_USERNAME"
ENV_PASSWORD = "ADGUARD_PASSWORD"
ENV_SCHEME = "ADGUARD_SCHEME"
ENV_TIMEOUT = "ADGUARD_TIMEOUT"
ENV_INSECURE = "ADGUARD_INSECURE"

_TRUE_VALUES = ("1", "true", "yes", "on")


class Settings(BaseModel):
    host: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    scheme: Literal['http', 'https'] = DEFAULT_SCHEME
    timeout: int = Field(DEFAULT_TIMEOUT, ge=MIN_TIMEOUT, le=MAX_TIMEOUT)  # seconds
    insecure: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from; defaults to os.environ after
                loading a .env file from the working directory

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If a variable is missing or invalid
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        data = {
            "host": environ.get(ENV_HOST, ""),
            "username": environ.get(ENV_USERNAME, ""),
            "password": environ.get(ENV_PASSWORD, ""),
            "scheme": environ.get(ENV_SCHEME) or DEFAULT_SCHEME,
            "timeout": environ.get(ENV_TIMEOUT) or DEFAULT_TIMEOUT,
            "insecure": environ.get(ENV_INSECURE, "").strip().lower() in _TRUE_VALUES,
        }
        return cls(**data)
