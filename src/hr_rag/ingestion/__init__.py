"""Document loading and chunking. The pipeline lives in ``hr_rag.ingestion.pipeline``."""

from .config import IngestionConfig
from .models import Chunk, Document, DocumentFormat
from .loaders import DocumentLoader, LoaderFactory, MarkdownLoader, PdfLoader, TextLoader
from .text_processing import RecursiveTextSplitter, merge_chunks

__all__ = [
    "IngestionConfig",
    "Chunk",
    "Document",
    "DocumentFormat",
    "DocumentLoader",
    "LoaderFactory",
    "TextLoader",
    "MarkdownLoader",
    "PdfLoader",
    "RecursiveTextSplitter",
    "merge_chunks",
]
