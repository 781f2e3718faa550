"""Feature flag resolution."""

from typing import TYPE_CHECKING

import structlog

from ideaflow.config import DEFAULT_CONFIG, FeaturesConfig
from ideaflow.exceptions import RemoteError

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.remote._protocol import RemoteDataService

ENHANCED_IDEA_GENERATION = "enhanced_idea_generation"


class FeatureFlags:
    """Resolve flags from configuration, then the remote service.

    Resolution order: a context listed in ``disabled_contexts`` for the flag
    wins, then a local ``overrides`` entry, then the remote lookup. A flag
    the remote does not know, or a remote failure, resolves to False.
    """

    def __init__(
        self,
        config: FeaturesConfig | None = None,
        remote: "RemoteDataService | None" = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._config = config or FeaturesConfig.model_validate(DEFAULT_CONFIG["features"])
        self._remote = remote
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.flags")

    async def is_enabled(
        self,
        name: str,
        user_id: str | None = None,
        context: str | None = None,
    ) -> bool:
        """Whether a flag is on for the given user and calling context."""
        if context is not None and context in self._config.disabled_contexts.get(name, ()):
            self._logger.debug("flag_disabled_in_context", flag=name, context=context)
            return False
        if name in self._config.overrides:
            return self._config.overrides[name]
        if self._remote is None:
            return False
        try:
            value = await self._remote.get_feature_flag(name, user_id)
        except RemoteError as e:
            self._logger.warning("flag_lookup_failed", flag=name, kind=e.kind.value, error=str(e))
            return False
        return bool(value)
