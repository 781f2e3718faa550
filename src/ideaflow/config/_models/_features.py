"""Feature flag configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class FeaturesConfig(BaseModel):
    """Local feature flag configuration.

    Attributes:
        overrides: Flag values that take precedence over the remote lookup.
        disabled_contexts: Per-flag list of calling contexts in which the
            flag is always off.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    overrides: dict[str, bool] = Field(default_factory=dict)
    disabled_contexts: dict[str, list[str]] = Field(default_factory=dict)
