import httpx

from config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS
from providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    """Provider for the OpenAI Responses API with json_schema output, over httpx."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None,
                 default_model: str | None = None, timeout: float | None = None):
        self.api_key = api_key if api_key is not None else OPENAI_API_KEY
        self.endpoint = f"{base_url or OPENAI_BASE_URL}/responses"
        self.default_model = default_model or OPENAI_MODEL
        self.timeout = timeout or OPENAI_TIMEOUT_SECONDS

    @property
    def name(self) -> str:
        return "openai"

    @staticmethod
    def _output_text(data: dict) -> str | None:
        if isinstance(data.get("output_text"), str):
            return data["output_text"]
        chunks = []
        for item in data.get("output") or []:
            for part in item.get("content") or []:
                if part.get("type") == "output_text" and isinstance(part.get("text"), str):
                    chunks.append(part["text"])
        return "".join(chunks) or None

    async def structured(self, messages: list[dict], schema: dict, model: str | None = None) -> dict:
        used_model = model or self.default_model
        try:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            }
            body = {
                "model": used_model,
                "input": messages,
                "text": {
                    "format": {
                        "type": "json_schema",
                        "name": schema["name"],
                        "schema": schema["schema"],
                        "strict": schema.get("strict", True),
                    }
                },
            }

            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                text = self._output_text(response.json())

            return {
                "text": text,
                "provider": self.name,
                "model": used_model,
                "status": "success",
                "error": None,
            }
        except httpx.TimeoutException:
            return {
                "text": None,
                "provider": self.name,
                "model": used_model,
                "status": "failed",
                "error": "Timeout",
            }
        except (httpx.HTTPError, ValueError) as e:
            return {
                "text": None,
                "provider": self.name,
                "model": used_model,
                "status": "failed",
                "error": str(e),
            }


_provider_instance = None


def get_provider() -> BaseProvider:
    """Shared provider instance, also usable as a FastAPI dependency."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = OpenAIProvider()
    return _provider_instance
