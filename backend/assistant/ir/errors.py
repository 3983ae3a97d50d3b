class AssistantError(Exception):
    """Base class for errors raised by the assistant core."""


class InvalidRequestError(AssistantError):
    """Required request fields are missing (HTTP 400)."""


class ArchitectureNotFoundError(AssistantError):
    """No architecture is stored under the given id (HTTP 404)."""

    def __init__(self, architecture_id: str):
        super().__init__(f"Architecture with ID {architecture_id} not found")
        self.architecture_id = architecture_id


class UpstreamGenerationError(AssistantError):
    """The generation backend failed or returned unusable text."""


class ArchitectureParseError(AssistantError):
    """A model reply could not be turned into a valid candidate graph."""
