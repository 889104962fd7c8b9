"""Analyzer utilities for the in-memory search stack.

Text is turned into comparable terms by a composable tokenizer/filter
pipeline. The default analyzer case-folds its input, treats every character
outside ``[a-z0-9]`` as a separator, and drops empty tokens, so queries and
indexed fields always agree on term boundaries.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers.

    Character offsets refer to the case-folded text the tokenizer scanned.
    """

    text: str
    position: int
    start_char: int
    end_char: int


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Regex-based tokenizer that yields word tokens."""

    def __init__(self, pattern: str = r"[a-z0-9]+", *, fold_case: bool = True) -> None:
        self.pattern = re.compile(pattern)
        self.fold_case = fold_case

    def __call__(self, text: str) -> Iterator[Token]:
        if self.fold_case:
            text = text.lower()
        for position, match in enumerate(self.pattern.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        if not text:
            return []
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


class StandardAnalyzer:
    """Default analyzer used for both indexing and queries."""

    def __init__(self) -> None:
        self.pipeline = AnalyzerPipeline(RegexTokenizer())

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)


_DEFAULT_ANALYZER = StandardAnalyzer()


def normalize(text: str | None) -> list[str]:
    """Return the normalized terms of ``text`` in left-to-right order.

    >>> normalize("Event-Loop, in Node.js!")
    ['event', 'loop', 'in', 'node', 'js']
    >>> normalize("   ")
    []
    """
    if not text:
        return []
    return [token.text for token in _DEFAULT_ANALYZER(text)]


def unique_terms(terms: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated terms while keeping first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for term in terms:
        if not term or term in seen:
            continue
        seen.add(term)
        ordered.append(term)
    return tuple(ordered)
