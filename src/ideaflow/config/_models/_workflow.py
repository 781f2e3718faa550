"""Workflow configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class WorkflowConfig(BaseModel):
    """Refinement workflow configuration.

    Attributes:
        autosave_interval: Seconds between background local saves.
        route: Location path of the refinement page.
        initial_step: Step used when neither the location nor the store
            provide one.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    autosave_interval: float = Field(default=30.0, gt=0)
    route: str = "/idea-hub/refinement"
    initial_step: int = Field(default=0, ge=0, lt=5)
