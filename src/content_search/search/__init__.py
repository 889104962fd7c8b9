"""
Search indexing and query engine package.

This package provides a pure-Python, in-memory search stack:
- analyzers: Tokenizer and normalization pipeline
- fuzzy: Typo-tolerant term matching
- schema: Indexed fields and their weights
- index: Immutable content index and its builder
- ranking: Weighted multi-field relevance scoring
- stats: Relatedness scoring helpers
- snippet: Excerpt generation and term highlighting
"""
