"""
HR Assistant RAG Application.

A chatbot that answers HR questions by combining retrieval over company
documents with tool calls against employee data.

Components:
- ingestion: Document loading, recursive chunking and the ingestion pipeline
- retriever: Embeddings, exact and HNSW vector stores, top-k retrieval
- agent: Bounded tool-calling agent with per-session memory
- service: Composition root exposing chat, search and upload ingestion
"""

__version__ = "0.1.0"
