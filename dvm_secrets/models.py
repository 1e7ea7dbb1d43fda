# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Secret request and reference data models."""

from dataclasses import dataclass, field
from typing import Any, Mapping

from .exceptions import InvalidReferenceError


@dataclass(frozen=True)
class SecretRequest:
    """The minimal ask passed to a provider.

    Attributes:
        name: Secret identifier. For the env provider ``github-token`` maps to
            ``DVM_SECRET_GITHUB_TOKEN``; for the keychain it is the account name.
        key: Optional field within a structured secret
        options: Provider-specific overrides (e.g. ``{"service": "work"}`` for the keychain)
    """
    name: str
    key: str | None = None
    options: Mapping[str, str] = field(default_factory=dict)


def _optional_str(data: Mapping[str, Any], field_name: str) -> str | None:
    value = data.get(field_name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidReferenceError(f"secret reference field '{field_name}' must be a string")
    return value


@dataclass(frozen=True)
class SecretReference:
    """A document-level reference to a secret (the ``secretRef`` record).

    Example YAML::

        env:
          - name: GITHUB_TOKEN
            valueFrom:
              secretRef:
                name: github-token
                provider: keychain
    """
    name: str
    provider: str | None = None
    key: str | None = None
    options: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "SecretReference":
        """Build a reference from a parsed YAML/JSON mapping.

        Raises:
            InvalidReferenceError: If the mapping is malformed
        """
        if not isinstance(data, Mapping):
            raise InvalidReferenceError("secret reference must be a mapping")

        name = data.get("name")
        if not isinstance(name, str):
            raise InvalidReferenceError("secret reference requires a string 'name'")

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise InvalidReferenceError("secret reference 'options' must be a mapping")

        return cls(
            name=name,
            provider=_optional_str(data, "provider"),
            key=_optional_str(data, "key"),
            options={str(k): str(v) for k, v in options.items()},
        )

    def to_request(self) -> SecretRequest:
        return SecretRequest(name=self.name, key=self.key, options=dict(self.options))


@dataclass(frozen=True)
class ValueSource:
    """The Kubernetes-style ``valueFrom`` wrapper around a secret reference."""
    secret_ref: SecretReference | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ValueSource":
        """Build a value source from the mapping found under ``valueFrom``.

        Raises:
            InvalidReferenceError: If the mapping is malformed
        """
        if not isinstance(data, Mapping):
            raise InvalidReferenceError("valueFrom must be a mapping")

        secret_ref = data.get("secretRef")
        if secret_ref is None:
            return cls()
        return cls(secret_ref=SecretReference.from_dict(secret_ref))
