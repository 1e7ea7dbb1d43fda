# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Environment variable secret provider."""

import os
import threading
from typing import Mapping

from ..exceptions import SecretNotFoundError
from ..models import SecretRequest
from ..provider import SecretProvider, check_cancelled
from ..resolver import convert_name_to_env_var

DEFAULT_ENV_PREFIX = "DVM_SECRET_"


class EnvSecretProvider(SecretProvider):
    """Secret provider that reads environment variables.

    ``github-token`` is looked up as ``DVM_SECRET_GITHUB_TOKEN`` and, if that
    is not set, as plain ``GITHUB_TOKEN`` so existing deployments keep working.

    A ``key`` on the request is accepted but ignored: the whole variable value
    is returned.

    Args:
        prefix: Prefix prepended to the converted name
        environ: Mapping to read from; the live ``os.environ`` if omitted
    """

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX, environ: Mapping[str, str] | None = None):
        self._prefix = prefix
        self._environ = environ

    @property
    def name(self) -> str:
        return "env"

    @property
    def prefix(self) -> str:
        return self._prefix

    def is_available(self) -> bool:
        return True

    def env_var_names(self, name: str) -> tuple[str, str]:
        """The prefixed and fallback variable names checked for ``name``."""
        converted = convert_name_to_env_var(name)
        return self._prefix + converted, converted

    def get_secret(self, request: SecretRequest, cancel: threading.Event | None = None) -> str:
        check_cancelled(cancel)

        environ = self._environ if self._environ is not None else os.environ
        for var in self.env_var_names(request.name):
            value = environ.get(var)
            if value is not None:
                return value

        raise SecretNotFoundError()
