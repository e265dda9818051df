"""OpenAI Responses API client for menu suggestions and calorie estimates."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from drink_journal.errors import AdvisoryServiceFailure
from drink_journal.services.suggestions import SuggestionClient


@dataclass
class OpenAISuggestionClient(SuggestionClient):
    """Suggestion client backed by OpenAI structured outputs."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 15.0
    ) -> "OpenAISuggestionClient":
        """Create an OpenAI suggestion client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=1)
        )

    async def complete_json(
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call OpenAI Responses API and decode the JSON answer."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            temperature=0.2,
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise AdvisoryServiceFailure("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise AdvisoryServiceFailure("OpenAI returned invalid JSON") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
