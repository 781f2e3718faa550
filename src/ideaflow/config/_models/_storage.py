"""Storage configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ideaflow.config._models._common import StorageBackend


class StorageConfig(BaseModel):
    """Durable draft storage configuration.

    Attributes:
        backend: Which state store implementation to use.
        path: SQLite database path. Empty selects the per-user state dir.
        key_prefix: Product prefix for the draft keys.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    backend: StorageBackend = StorageBackend.SQLITE
    path: str = ""
    key_prefix: str = Field(default="wheel99", pattern=r"^[A-Za-z0-9_\-]+$")
