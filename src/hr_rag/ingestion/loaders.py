"""
Per-format document loaders.

Each loader turns one file into a list of Documents and tags every Document
with its ``source`` path and ``format``. The LoaderFactory maps file
extensions to loaders through a fixed registry.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from llama_index.readers.file import PDFReader

from ..exceptions import LoadError, UnsupportedFormatError
from .models import Document, DocumentFormat

logger = logging.getLogger(__name__)


class DocumentLoader(ABC):
    """Abstract base class for document loaders."""

    format: DocumentFormat

    @abstractmethod
    def load(self, path: Union[str, Path]) -> List[Document]:
        """
        Load a file.

        Args:
            path: File to read.

        Returns:
            List[Document]: Extracted documents.

        Raises:
            LoadError: If the file cannot be read or parsed.
        """
        pass

    def _metadata(self, path: Path) -> Dict[str, str]:
        return {"source": str(path), "format": self.format.value}


class TextLoader(DocumentLoader):
    """Plain UTF-8 text files."""

    format = DocumentFormat.TEXT

    def load(self, path: Union[str, Path]) -> List[Document]:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Could not read {path}: {e}", path) from e
        return [Document(content=content, metadata=self._metadata(path))]


class MarkdownLoader(TextLoader):
    """Markdown is indexed as raw text; headers stay in the content."""

    format = DocumentFormat.MARKDOWN


class PdfLoader(DocumentLoader):
    """PDF files, one Document per page."""

    format = DocumentFormat.PDF

    def __init__(self, reader: Optional[PDFReader] = None):
        self.reader = reader or PDFReader()

    def load(self, path: Union[str, Path]) -> List[Document]:
        path = Path(path)
        if not path.is_file():
            raise LoadError(f"File not found: {path}", path)

        try:
            pages = self.reader.load_data(file=path)
        except Exception as e:
            raise LoadError(f"Could not parse PDF {path}: {e}", path) from e

        documents = []
        for page in pages:
            text = page.get_content()
            if not text.strip():
                continue
            metadata = self._metadata(path)
            if "page_label" in page.metadata:
                metadata["page"] = page.metadata["page_label"]
            documents.append(Document(content=text, metadata=metadata))

        logger.info(f"Extracted {len(documents)} non-empty pages from {path.name}")
        return documents


class LoaderFactory:
    """Selects a loader from the file extension."""

    def __init__(self):
        markdown = MarkdownLoader()
        self._loaders: Dict[str, DocumentLoader] = {
            ".txt": TextLoader(),
            ".md": markdown,
            ".markdown": markdown,
            ".pdf": PdfLoader(),
        }

    def get_loader(self, path: Union[str, Path]) -> DocumentLoader:
        ext = Path(path).suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise UnsupportedFormatError(
                f"Unsupported file type '{ext or '<none>'}'. Allowed: {', '.join(self.supported_extensions())}",
                path,
            )
        return loader

    def supported_extensions(self) -> List[str]:
        return sorted(self._loaders)

    def is_supported(self, path: Union[str, Path]) -> bool:
        return Path(path).suffix.lower() in self._loaders

    def load(self, path: Union[str, Path]) -> List[Document]:
        return self.get_loader(path).load(path)
