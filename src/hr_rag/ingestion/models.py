from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class DocumentFormat(str, Enum):
    """Source formats understood by the loaders."""

    PDF = "pdf"
    MARKDOWN = "markdown"
    TEXT = "text"


@dataclass(frozen=True)
class Document:
    """Raw text extracted from a file, with source metadata."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str:
        return self.metadata.get("source", "")

    @property
    def format(self) -> str:
        return self.metadata.get("format", "")


@dataclass(frozen=True)
class Chunk:
    """Size-bounded slice of a Document. The unit stored in the vector store."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str:
        return self.metadata.get("source", "")

    @property
    def chunk_index(self) -> int:
        return self.metadata.get("chunk_index", 0)

    @property
    def start_index(self) -> int:
        return self.metadata.get("start_index", 0)

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "metadata": dict(self.metadata)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chunk":
        return cls(content=data["content"], metadata=dict(data.get("metadata", {})))
