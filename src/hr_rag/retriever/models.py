from dataclasses import dataclass

from ..ingestion.models import Chunk


@dataclass
class RetrievedChunk:
    """Retrieved chunk with its similarity score."""

    chunk: Chunk
    score: float

    @property
    def text(self) -> str:
        return self.chunk.content

    @property
    def source(self) -> str:
        return self.chunk.source

    def preview(self, length: int = 200) -> str:
        text = self.chunk.content
        return text if len(text) <= length else text[:length] + "..."
