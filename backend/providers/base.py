from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """Abstract base class for all AI providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of this provider (e.g. 'openai')."""
        ...

    @abstractmethod
    async def structured(self, messages: list[dict], schema: dict, model: str | None = None) -> dict:
        """
        Send a request constrained to a JSON schema.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            schema: dict with 'name', 'schema' and 'strict' keys.
            model: Optional model identifier. Provider uses its default if None.

        Returns:
            dict with keys:
                - text: str | None  - the JSON text produced by the model
                - provider: str     - provider name
                - model: str        - model used
                - status: "success" | "failed"
                - error: str | None - error message on failure
        """
        ...
