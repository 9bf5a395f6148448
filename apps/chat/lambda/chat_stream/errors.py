"""Domain-level exceptions for the chat stream core."""


class ChatStreamError(Exception):
    """Base class for errors raised by the chat stream core."""


class BadRequestError(ChatStreamError, ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class NoModelsAvailableError(ChatStreamError):
    """Raised when a provider exposes neither static nor dynamic models."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"No models found for provider {provider}")
        self.provider = provider
