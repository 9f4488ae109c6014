"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ccgate.toml only contains
overrides.  A standalone setup needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel

from ccgate.infrastructure.backends import DEFAULT_LOCAL_KEY, DEFAULT_REMOTE_KEY


class RemoteConfig(BaseModel):
    """[remote] section — the host platform's installation storage."""

    model_config = {"frozen": True}

    base_url: str | None = None
    installation_id: str | None = None
    app_id: str | None = None
    email: str | None = None
    api_token: str | None = None
    storage_key: str = DEFAULT_REMOTE_KEY
    timeout: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.base_url) and bool(self.installation_id or self.app_id)


class LocalConfig(BaseModel):
    """[local] section — fallback storage file."""

    model_config = {"frozen": True}

    path: str = ".ccgate/storage.json"
    storage_key: str = DEFAULT_LOCAL_KEY
