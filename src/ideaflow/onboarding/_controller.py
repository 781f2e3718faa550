"""Onboarding flow controller.

Owns the current onboarding step and the accumulated form selections, and
records progress through the remote data service. Only step sequencing is
handled here; recommendation content is out of scope.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog

from ideaflow.enums import OnboardingStep, UserRole
from ideaflow.exceptions import RemoteError
from ideaflow.onboarding._graph import next_step, previous_step, progress
from ideaflow.remote import OnboardingState, PersonaRequest

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.remote import Payload, RemoteDataService
    from ideaflow.session import UserSession

# Selection key holding the chosen role
ROLE_KEY = "userRole"
COMPLETED_MARKER = "complete"


def parse_role(value: object) -> UserRole | None:
    """Interpret a stored selection as a role, or None."""
    if isinstance(value, UserRole):
        return value
    if isinstance(value, str):
        try:
            return UserRole(value)
        except ValueError:
            return None
    return None


def parse_onboarding_step(value: object) -> OnboardingStep | None:
    """Interpret a stored step name, or None."""
    if isinstance(value, str):
        try:
            return OnboardingStep(value)
        except ValueError:
            return None
    return None


class OnboardingController:
    """Drives one user through the onboarding steps.

    Attributes:
        current_step: The step being shown.
        selections: Form data gathered so far, keyed as the forms send it.
        persona_id: The persona progress is recorded against, once known.
        is_complete: Set after the completion step is confirmed or skipped.
        is_loading: Set while a remote call is in progress.
    """

    def __init__(
        self,
        remote: "RemoteDataService",
        user: "UserSession",
        persona_id: str | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._remote = remote
        self._user = user
        self._logger: "FilteringBoundLogger" = (
            logger or structlog.get_logger("ideaflow.onboarding")
        ).bind(user_id=user.user_id)
        self.persona_id = persona_id
        self.current_step = OnboardingStep.WELCOME
        self.selections: dict[str, object] = {}
        self.state: OnboardingState | None = None
        self.is_complete = False
        self.is_loading = False

    @property
    def role(self) -> UserRole | None:
        return parse_role(self.selections.get(ROLE_KEY))

    @property
    def progress(self) -> float:
        return progress(self.current_step)

    async def resume(self) -> OnboardingStep:
        """Restore step and selections from the remote record, if any."""
        if self.persona_id is None:
            return self.current_step
        self.is_loading = True
        try:
            state = await self._remote.get_onboarding_state(self._user.user_id, self.persona_id)
        except RemoteError as e:
            self._logger.error("onboarding_load_failed", kind=e.kind.value, error=str(e))
            return self.current_step
        finally:
            self.is_loading = False
        self.state = state
        if state is not None:
            self.current_step = (
                parse_onboarding_step(state.current_step) or OnboardingStep.WELCOME
            )
            self.selections = dict(state.form_data)
            self.is_complete = state.is_complete
        self._logger.info("onboarding_resumed", step=self.current_step.value)
        return self.current_step

    async def _ensure_persona(self) -> bool:
        role = self.role
        if self.persona_id is not None or ROLE_KEY not in self.selections:
            return True
        persona_type = role or UserRole.SERVICE_PROVIDER
        request = PersonaRequest(name=f"My {persona_type.value} profile", type=persona_type)
        try:
            persona = await self._remote.create_persona(self._user.user_id, request)
        except RemoteError as e:
            self._logger.error("persona_create_failed", kind=e.kind.value, error=str(e))
            return False
        self.persona_id = persona.id
        self._logger.info("persona_created", persona_id=persona.id, type=persona_type.value)
        return True

    async def _persist(self, update: "Payload") -> None:
        if self.persona_id is None:
            return
        await self._remote.update_onboarding_state(self._user.user_id, self.persona_id, update)

    async def advance(self, step_data: Mapping[str, object] | None = None) -> bool:
        """Merge ``step_data`` into the selections and move forward.

        At the role selection step a persona is created first if there is
        none; if that fails the step does not change. At the completion
        step the flow is marked complete instead of moving.

        Returns:
            True if the step changed or the flow completed.
        """
        self.is_loading = True
        try:
            self.selections = {**self.selections, **(step_data or {})}
            leaving = self.current_step
            if leaving is OnboardingStep.ROLE_SELECTION and not await self._ensure_persona():
                return False
            try:
                await self._persist(
                    {"current_step": leaving.value, "form_data": dict(self.selections)}
                )
                target = next_step(leaving, self.role)
                if target is None:
                    await self._complete()
                    return True
            except RemoteError as e:
                self._logger.error(
                    "onboarding_save_failed", step=leaving.value, kind=e.kind.value, error=str(e)
                )
                return False
            self.current_step = target
            self._logger.info("onboarding_step", step=target.value, previous=leaving.value)
            return True
        finally:
            self.is_loading = False

    async def _complete(self) -> None:
        completed = list(self.state.completed_steps) if self.state else []
        await self._persist(
            {"is_complete": True, "completed_steps": [*completed, COMPLETED_MARKER]}
        )
        self.is_complete = True
        self._logger.info("onboarding_completed")

    def retreat(self) -> bool:
        """Move to the role-aware previous step. Does nothing at welcome."""
        target = previous_step(self.current_step, self.role)
        if target is None:
            return False
        self.current_step = target
        return True

    async def skip(self) -> bool:
        """Mark onboarding complete without finishing the steps."""
        self.is_loading = True
        try:
            await self._persist(
                {"is_complete": True, "form_data": {**self.selections, "skipped": True}}
            )
        except RemoteError as e:
            self._logger.error("onboarding_skip_failed", kind=e.kind.value, error=str(e))
            return False
        finally:
            self.is_loading = False
        self.is_complete = True
        self._logger.info("onboarding_skipped")
        return True
