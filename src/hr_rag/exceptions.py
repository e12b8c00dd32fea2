"""Exception hierarchy for the HR assistant."""

from pathlib import Path
from typing import Optional, Union


class HRAssistantError(Exception):
    """Base class for all errors raised by hr_rag."""


class IngestionError(HRAssistantError):
    """A single file could not be ingested. The batch can continue."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class UnsupportedFormatError(IngestionError):
    """No loader is registered for the file extension."""


class LoadError(IngestionError):
    """The file exists but could not be read or parsed."""


class SplitError(HRAssistantError):
    """The text splitter is misconfigured."""


class EmbeddingError(HRAssistantError):
    """The embedding model failed or returned unusable vectors."""


class VectorStoreIOError(HRAssistantError):
    """The persisted vector index could not be read or written."""


class AgentExecutionError(HRAssistantError):
    """Base class for failures inside the agent loop."""


class AuthConfigError(AgentExecutionError):
    """Model credentials are missing or were rejected."""


class GenericExecutionError(AgentExecutionError):
    """Any other failure of the model or of a tool."""
