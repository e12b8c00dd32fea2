"""
Tests for the ingestion pipeline.
"""

import pytest

from hr_rag.exceptions import UnsupportedFormatError
from hr_rag.ingestion import IngestionConfig
from hr_rag.ingestion.pipeline import IngestionPipeline


@pytest.fixture
def docs_dir(tmp_path):
    docs = tmp_path / "documents"
    docs.mkdir()
    return docs


@pytest.fixture
def pipeline(docs_dir, memory_store):
    config = IngestionConfig(docs_dir=docs_dir, chunk_size=1000, chunk_overlap=200)
    return IngestionPipeline(config=config, vector_store=memory_store)


class TestIngestionPipeline:
    """Tests for IngestionPipeline."""

    async def test_plain_text_file_gives_three_chunks(self, docs_dir, pipeline, memory_store):
        """A 2,500-character text file is stored as three overlapping chunks."""
        (docs_dir / "long.txt").write_text("abcdefghi " * 250, encoding="utf-8")

        result = await pipeline.ingest_all()

        assert result.total_chunks == 3
        assert result.files == ["long.txt"]
        assert memory_store.get_document_count() == 3

    async def test_failed_file_is_skipped(self, docs_dir, pipeline, memory_store):
        """An unreadable file is reported as failed and the batch continues."""
        (docs_dir / "a_policy.md").write_text("# Leave\n\n25 days per year.", encoding="utf-8")
        (docs_dir / "b_broken.txt").write_bytes(b"\xff\xfe\xfa")
        (docs_dir / "c_faq.txt").write_text("Payday is the 25th.", encoding="utf-8")

        result = await pipeline.ingest_all()

        assert result.files == ["a_policy.md", "c_faq.txt"]
        assert result.failed == ["b_broken.txt"]
        assert result.total_chunks == 2
        assert memory_store.get_document_count() == 2

    async def test_unsupported_files_are_ignored(self, docs_dir, pipeline):
        (docs_dir / "notes.txt").write_text("Bring your badge.", encoding="utf-8")
        (docs_dir / "salaries.xlsx").write_bytes(b"PK")
        (docs_dir / "nested").mkdir()

        result = await pipeline.ingest_all()

        assert result.files == ["notes.txt"]
        assert result.failed == []

    async def test_missing_directory(self, tmp_path, memory_store):
        """A missing documents directory is not fatal."""
        config = IngestionConfig(docs_dir=tmp_path / "does-not-exist")
        pipeline = IngestionPipeline(config=config, vector_store=memory_store)

        result = await pipeline.ingest_all()

        assert result.total_chunks == 0
        assert result.files == []

    async def test_ingest_file(self, tmp_path, pipeline, memory_store):
        """A single file goes through the same path and reports its chunk count."""
        path = tmp_path / "upload.md"
        path.write_text("# Expenses\n\nReceipts are required for every claim.", encoding="utf-8")

        count = await pipeline.ingest_file(path)

        assert count == 1
        assert memory_store.get_document_count() == 1

    async def test_ingest_file_propagates_errors(self, tmp_path, pipeline):
        path = tmp_path / "upload.docx"
        path.write_bytes(b"PK")

        with pytest.raises(UnsupportedFormatError):
            await pipeline.ingest_file(path)
