from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class UserSession(BaseModel):
    """The signed-in user a workflow acts on behalf of.

    Passed explicitly to the components that need it; there is no global
    current-user lookup.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    email: str | None = None
    display_name: str | None = None

    @property
    def author(self) -> str:
        """Author tag recorded on durable store writes."""
        return f"user:{self.user_id}"
