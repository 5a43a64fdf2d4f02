"""
Config - process settings read from the environment.

Recognised variables:

    ENTITYSTORE_BACKEND   memory | datastore   (default: memory)
    GCLOUD_PROJECT        project id, required for the datastore backend
    DATASTORE_NAMESPACE   optional Datastore namespace
    HOST                  HTTP bind host       (default: 0.0.0.0)
    PORT                  HTTP bind port       (default: 8080)
    PAGE_SIZE             default list limit   (default: 10)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from entitystore.interfaces.store_client import StoreClient

BACKEND_MEMORY = "memory"
BACKEND_DATASTORE = "datastore"
_BACKENDS = (BACKEND_MEMORY, BACKEND_DATASTORE)


class ConfigError(ValueError):
    """Raised for invalid runtime configuration."""


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw, 10)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Config:
    backend: str = BACKEND_MEMORY
    project: str | None = None
    namespace: str | None = None
    host: str = "0.0.0.0"
    port: int = 8080
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.backend not in _BACKENDS:
            raise ConfigError(
                f"Unknown backend {self.backend!r}, expected one of {', '.join(_BACKENDS)}"
            )
        if self.backend == BACKEND_DATASTORE and not self.project:
            raise ConfigError("GCLOUD_PROJECT is required for the datastore backend")
        if self.port > 65535:
            raise ConfigError(f"PORT out of range: {self.port}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if env is None else env
        return cls(
            backend=env.get("ENTITYSTORE_BACKEND", BACKEND_MEMORY).strip().lower(),
            project=env.get("GCLOUD_PROJECT") or None,
            namespace=env.get("DATASTORE_NAMESPACE") or None,
            host=env.get("HOST", "0.0.0.0"),
            port=_int_setting(env, "PORT", 8080),
            page_size=_int_setting(env, "PAGE_SIZE", 10),
        )


def build_store(config: Config) -> StoreClient:
    """Construct the store client selected by ``config``."""
    if config.backend == BACKEND_DATASTORE:
        from entitystore.stores.datastore_store import DatastoreStore

        return DatastoreStore.create(config.project, config.namespace)

    from entitystore.stores.memory_store import MemoryStore

    return MemoryStore()
