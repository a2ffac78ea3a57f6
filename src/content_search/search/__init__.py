"""
Search indexing and scoring package.

This package provides the in-memory search stack:
- analyzers: Tokenizer and filters (lowercase, length, stop words, cap)
- indexer: Per-document, per-field term frequency index
- stats: Document frequencies and IDF
- scorer: Weighted TF-IDF scoring with relevance breakdown
- filters: Category, tag and date-range predicates
- snippet: Highlighted snippet extraction
"""
