import logging
from typing import List, Optional, Sequence, Tuple

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..exceptions import SplitError
from .models import Chunk, Document

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

# Paragraph -> line -> sentence -> word -> character.
DEFAULT_SEPARATORS: List[str] = [r"\n\n", r"\n", r"(?<=[.!?]) ", r" ", ""]


class RecursiveTextSplitter:
    """
    Character-based recursive splitter with overlap.

    Wraps langchain's RecursiveCharacterTextSplitter. Separators stay attached
    to the text they terminate and whitespace is never stripped, so every
    chunk is an exact slice of the source and ``merge_chunks`` can rebuild it
    from the recorded ``start_index``.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            chunk_size: Maximum chunk length in characters
            chunk_overlap: Characters shared by consecutive chunks (approximate)
            separators: Regex patterns, coarsest first. An empty string means
                single characters.
        """
        if chunk_size <= 0:
            raise SplitError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise SplitError(f"chunk_overlap must be non-negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise SplitError(f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators) if separators is not None else list(DEFAULT_SEPARATORS)
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=self.separators,
            is_separator_regex=True,
            keep_separator="end",
            strip_whitespace=False,
            add_start_index=True,
        )

    def split_spans(self, text: str) -> List[Span]:
        """Return (start, end) offsets of the chunks for ``text``."""
        if not text:
            return []
        pieces = self._splitter.create_documents([text])
        return [(p.metadata["start_index"], p.metadata["start_index"] + len(p.page_content)) for p in pieces]

    def split_text(self, text: str) -> List[str]:
        return [text[start:end] for start, end in self.split_spans(text)]

    def split_documents(self, documents: Sequence[Document]) -> List[Chunk]:
        """Split each document, extending its metadata with chunk_index and start_index."""
        chunks: List[Chunk] = []
        for document in documents:
            spans = self.split_spans(document.content)
            for index, (start, end) in enumerate(spans):
                metadata = {**document.metadata, "chunk_index": index, "start_index": start}
                chunks.append(Chunk(content=document.content[start:end], metadata=metadata))
            logger.debug(f"Split {document.source or '<text>'} into {len(spans)} chunks")
        return chunks


def merge_chunks(chunks: Sequence[Chunk]) -> str:
    """Rebuild the source text from the ordered chunks of one document."""
    text = ""
    for chunk in sorted(chunks, key=lambda c: c.chunk_index):
        overlap = len(text) - chunk.start_index
        if overlap < 0:
            raise SplitError(f"Gap before chunk {chunk.chunk_index}: chunks do not cover the source text")
        text += chunk.content[overlap:]
    return text
