"""Error taxonomy shared by the services and the controller."""


class ResonanceError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteGenerationError(ResonanceError):
    """The Gemini SDK call failed (network, quota, malformed response)."""


class GenerationError(ResonanceError):
    """Topic generation failed; retryable by the user."""


class ChatError(ResonanceError):
    """A debate message could not be delivered."""


class InvalidTransition(ResonanceError):
    """The requested action is not allowed in the current state."""
