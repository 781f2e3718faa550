"""Remote data service configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class RemoteConfig(BaseModel):
    """Remote data service connection settings.

    An empty ``base_url`` means no remote is configured; generation falls
    back to deterministic content and remote saves fail softly.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    base_url: str = ""
    api_key: str = ""
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)

    @property
    def configured(self) -> bool:
        """Whether a remote endpoint is set."""
        return bool(self.base_url)
