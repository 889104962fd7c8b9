"""Fuzzy matching for typo-tolerant search.

This module provides edit distance calculation and a graded match score
between a query term and an index term.

Scoring policy:
- Exact match scores 1.0
- Prefix match (query term of 2+ chars) scores 0.8
- Bounded edit distance scores up to 0.6, scaled by how many edits were needed
- No fuzzy matching for terms of 3 chars or fewer (too many false positives)
"""

from __future__ import annotations

from collections.abc import Iterable


EXACT_SCORE = 1.0
PREFIX_SCORE = 0.8
FUZZY_SCORE_CEILING = 0.6
MIN_PREFIX_LENGTH = 2
MIN_FUZZY_LENGTH = 4


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming for O(m*n) time complexity, with optional
    early termination when distance exceeds max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.
        If max_distance is set and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("event", "evnt")
        1
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = curr_row[0]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def get_max_edit_distance(term_length: int) -> int:
    """Get the maximum allowed edit distance for a query term of this length.

    Tolerance grows with length: ``term_length // 4 + 1`` edits, so 4-7 chars
    allow 2 edits, 8-11 chars allow 3, and so on. Terms shorter than 4 chars
    get no edit tolerance at all.
    """
    if term_length < MIN_FUZZY_LENGTH:
        return 0
    return term_length // 4 + 1


def match_score(query_term: str, index_term: str) -> float:
    """Return how well ``index_term`` matches ``query_term``, in [0, 1].

    Both terms are expected to be normalized already; comparison is
    case-insensitive regardless.

    >>> match_score("event", "event")
    1.0
    >>> match_score("ev", "event")
    0.8
    >>> round(match_score("evnt", "event"), 2)
    0.45
    >>> match_score("ev", "ex")
    0.0
    """
    if not query_term or not index_term:
        return 0.0

    query_lower = query_term.lower()
    index_lower = index_term.lower()

    if query_lower == index_lower:
        return EXACT_SCORE
    if len(query_lower) >= MIN_PREFIX_LENGTH and index_lower.startswith(query_lower):
        return PREFIX_SCORE

    max_distance = get_max_edit_distance(len(query_lower))
    if max_distance == 0:
        return 0.0
    if abs(len(query_lower) - len(index_lower)) > max_distance:
        return 0.0

    distance = levenshtein_distance(query_lower, index_lower, max_distance)
    if distance > max_distance:
        return 0.0
    return max(0.0, 1.0 - distance / len(query_lower)) * FUZZY_SCORE_CEILING


def find_fuzzy_matches(query_term: str, vocabulary: Iterable[str]) -> list[tuple[str, float]]:
    """Find terms in vocabulary that match the query term with a nonzero score.

    Returns:
        List of (matching_term, score) tuples, best matches first and
        alphabetical among equal scores.
    """
    if not query_term:
        return []

    matches: list[tuple[str, float]] = []
    for term in vocabulary:
        score = match_score(query_term, term)
        if score > 0:
            matches.append((term, score))

    matches.sort(key=lambda x: (-x[1], x[0]))
    return matches
