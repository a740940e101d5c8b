"""OpenAI Responses API client for advisory synthesis."""

from dataclasses import dataclass

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from pantry_insights.domain.errors import AdvisoryUnavailableError
from pantry_insights.services.advisory import AdvisoryClient


@dataclass
class OpenAIAdvisoryClient(AdvisoryClient):
    """Advisory client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, *, timeout_seconds: float = 30.0, store: bool = False
    ) -> "OpenAIAdvisoryClient":
        """Create a client with an explicit timeout and no retries."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0),
            store=store,
        )

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> str:
        """Call OpenAI Responses API with a JSON schema text format."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=prompt,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                text={
                    "format": {
                        "type": "json_schema",
                        "name": schema_name,
                        "strict": False,
                        "schema": schema,
                    }
                },
                store=self.store,
            )
        except APIConnectionError as exc:
            raise AdvisoryUnavailableError(f"Advisory request failed: {exc}") from exc
        except APIStatusError as exc:
            raise AdvisoryUnavailableError(
                f"Advisory request returned HTTP {exc.status_code}"
            ) from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
