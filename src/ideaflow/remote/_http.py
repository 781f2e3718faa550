"""HTTP implementation of the remote data service.

Talks to a PostgREST-style REST surface for records and a small JSON API
for generation. Connection and timeout failures are retried with
exponential backoff; every other failure is classified and raised as a
``RemoteError`` at once.
"""

from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Self, cast

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ideaflow.enums import RemoteErrorKind
from ideaflow.exceptions import RemoteError
from ideaflow.models import AIFeedback, BusinessSuggestions, IdeaData, Variation
from ideaflow.remote._errors import remote_error
from ideaflow.remote._models import (
    ChatMessage,
    GenerationContext,
    OnboardingState,
    Payload,
    Persona,
    PersonaRequest,
    SavedRecord,
)
from ideaflow.utils import load_json

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.config import RemoteConfig

_VARIATIONS = TypeAdapter(list[Variation])
_RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class HttpRemoteService:
    """Remote data service over HTTP.

    Use as an async context manager, or call ``aclose`` when done.
    """

    def __init__(  # noqa: PLR0913
        self,
        base_url: str,
        *,
        api_key: str = "",
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._max_retries = max_retries
        self._logger: FilteringBoundLogger = logger or structlog.get_logger("ideaflow.remote")

    @classmethod
    def from_config(
        cls,
        config: "RemoteConfig",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> Self:
        """Build a client from the ``remote`` configuration section."""
        return cls(
            config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=config.max_retries,
            transport=transport,
            logger=logger,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: object = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
                reraise=True,
            ):
                with attempt:
                    return await self._client.request(
                        method, url, json=json, params=params, headers=headers
                    )
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            self._logger.warning("remote_unreachable", method=method, url=url, error=str(e))
            raise RemoteError(str(e) or type(e).__name__, kind=RemoteErrorKind.NETWORK) from e
        msg = "retry loop exited without a response"
        raise AssertionError(msg)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: object = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> object:
        """Send a request and return the decoded JSON body.

        Raises:
            RemoteError: On network failure, HTTP error status or a body
                that is not JSON.
        """
        response = await self._send(method, url, json=json, params=params, headers=headers)
        if response.is_error:
            raise self._error_from_response(response)
        if not response.content:
            return None
        try:
            return cast("object", response.json())
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON from {url}", status_code=response.status_code
            ) from e

    def _error_from_response(self, response: httpx.Response) -> RemoteError:
        code: str | None = None
        message = response.reason_phrase or f"HTTP {response.status_code}"
        body = load_json(response.content)
        if isinstance(body, dict):
            raw_code = body.get("code")  # pyright: ignore[reportUnknownMemberType]
            code = str(raw_code) if raw_code is not None else None  # pyright: ignore[reportUnknownArgumentType]
            raw_message = body.get("message") or body.get("error")  # pyright: ignore[reportUnknownMemberType]
            if raw_message:
                message = str(raw_message)  # pyright: ignore[reportUnknownArgumentType]
        error = remote_error(message, code=code, status_code=response.status_code)
        self._logger.warning(
            "remote_error",
            url=str(response.request.url),
            status=response.status_code,
            kind=error.kind.value,
            field=error.field,
            error=message,
        )
        return error

    @staticmethod
    def _first_row(body: object, what: str) -> dict[str, object]:
        if isinstance(body, list) and body and isinstance(body[0], dict):
            return cast("dict[str, object]", body[0])
        if isinstance(body, dict):
            return cast("dict[str, object]", body)
        msg = f"Remote returned no {what}"
        raise RemoteError(msg)

    @staticmethod
    def _idea_body(idea: IdeaData, context: GenerationContext) -> Payload:
        return {
            "idea": idea.model_dump(mode="json", by_alias=True, exclude_none=True),
            "context": context.model_dump(mode="json"),
        }

    # Generation

    async def refine_idea(self, idea: IdeaData, context: GenerationContext) -> AIFeedback:
        body = await self._request("POST", "/ai/refine", json=self._idea_body(idea, context))
        try:
            return AIFeedback.model_validate(body)
        except ValidationError as e:
            raise RemoteError(f"Malformed feedback: {e}") from e

    async def generate_variations(
        self, idea: IdeaData, context: GenerationContext
    ) -> list[Variation]:
        body = await self._request(
            "POST", "/ai/variations", json=self._idea_body(idea, context)
        )
        items = body.get("variations") if isinstance(body, dict) else body  # pyright: ignore[reportUnknownMemberType]
        try:
            return _VARIATIONS.validate_python(items)
        except ValidationError as e:
            raise RemoteError(f"Malformed variations: {e}") from e

    async def generate_business_model(
        self, idea: IdeaData, context: GenerationContext
    ) -> BusinessSuggestions:
        body = await self._request(
            "POST", "/ai/business-model", json=self._idea_body(idea, context)
        )
        try:
            return BusinessSuggestions.model_validate(body)
        except ValidationError as e:
            raise RemoteError(f"Malformed business suggestions: {e}") from e

    async def chat_response(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        context: GenerationContext,
    ) -> str:
        body = await self._request(
            "POST",
            "/ai/chat",
            json={
                "prompt": prompt,
                "history": [message.model_dump() for message in history],
                "context": context.model_dump(mode="json"),
            },
        )
        if isinstance(body, dict) and isinstance(body.get("response"), str):  # pyright: ignore[reportUnknownMemberType]
            return cast("str", body["response"])
        if isinstance(body, str):
            return body
        msg = "Malformed chat response"
        raise RemoteError(msg)

    # Ideas

    async def insert_idea(self, payload: Payload) -> SavedRecord:
        body = await self._request(
            "POST", "/rest/v1/ideas", json=payload, headers=_RETURN_REPRESENTATION
        )
        return SavedRecord.model_validate(self._first_row(body, "idea"))

    async def update_idea(self, idea_id: str, payload: Payload) -> SavedRecord:
        body = await self._request(
            "PATCH",
            "/rest/v1/ideas",
            json=payload,
            params={"id": f"eq.{idea_id}"},
            headers=_RETURN_REPRESENTATION,
        )
        return SavedRecord.model_validate(self._first_row(body, "idea"))

    # Feature flags

    async def _flag_value(self, params: dict[str, str]) -> bool | None:
        body = await self._request(
            "GET", "/rest/v1/feature_flags", params={"select": "value", **params}
        )
        if isinstance(body, list) and body and isinstance(body[0], dict):
            value = cast("dict[str, object]", body[0]).get("value")
            if isinstance(value, bool):
                return value
        return None

    async def get_feature_flag(self, name: str, user_id: str | None = None) -> bool | None:
        if user_id:
            value = await self._flag_value({"name": f"eq.{name}", "user_id": f"eq.{user_id}"})
            if value is not None:
                return value
        return await self._flag_value({"name": f"eq.{name}", "user_id": "is.null"})

    # Onboarding

    async def get_onboarding_state(
        self, user_id: str, persona_id: str
    ) -> OnboardingState | None:
        body = await self._request(
            "GET",
            "/rest/v1/onboarding_states",
            params={"user_id": f"eq.{user_id}", "persona_id": f"eq.{persona_id}"},
        )
        if not isinstance(body, list) or not body:
            return None
        try:
            return OnboardingState.model_validate(body[0])
        except ValidationError as e:
            raise RemoteError(f"Malformed onboarding state: {e}") from e

    async def update_onboarding_state(
        self, user_id: str, persona_id: str, update: Payload
    ) -> None:
        _ = await self._request(
            "POST",
            "/rest/v1/onboarding_states",
            json={"user_id": user_id, "persona_id": persona_id, **update},
            params={"on_conflict": "user_id,persona_id"},
            headers={"Prefer": "resolution=merge-duplicates"},
        )

    async def create_persona(self, user_id: str, persona: PersonaRequest) -> Persona:
        body = await self._request(
            "POST",
            "/rest/v1/personas",
            json={"user_id": user_id, **persona.model_dump(mode="json")},
            headers=_RETURN_REPRESENTATION,
        )
        return Persona.model_validate(self._first_row(body, "persona"))
