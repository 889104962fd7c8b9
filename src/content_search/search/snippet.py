"""Excerpt generation and term highlighting for result previews.

Smart Defaults:
- Excerpts drop markdown emphasis/heading/code markers
- Long excerpts end on a word boundary followed by an ellipsis
- Highlights never overlap and prefer the longer of two competing matches
"""

from __future__ import annotations

from collections.abc import Sequence
import re


MARKDOWN_MARKER_PATTERN = re.compile(r"[#*`]")
ELLIPSIS = "..."


def generate_excerpt(content: str, max_length: int = 150) -> str:
    """Build a short plain-text preview of ``content``.

    Args:
        content: Markdown-ish body text.
        max_length: Maximum number of characters kept before the ellipsis.

    Returns:
        The cleaned text when it fits, otherwise the text cut at the last
        space before ``max_length`` (or hard-cut when there is none) with
        ``...`` appended.

    Examples:
        >>> generate_excerpt("# Event *loop*")
        'Event loop'
        >>> generate_excerpt("one two three", max_length=8)
        'one two...'
    """
    clean = MARKDOWN_MARKER_PATTERN.sub("", content or "").strip()
    if len(clean) <= max_length:
        return clean

    truncated = clean[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + ELLIPSIS
    return truncated + ELLIPSIS


def highlight_terms(
    text: str,
    terms: Sequence[str],
    style: str = "plain",
    max_highlights: int | None = None,
) -> str:
    """Highlight case-insensitive occurrences of ``terms`` in ``text``.

    Args:
        text: The text to highlight.
        terms: Terms to highlight; terms shorter than 2 chars are ignored.
        style: "plain" for [[term]] or "html" for <mark>term</mark>.
        max_highlights: Optional cap on the number of highlighted spans.

    Returns:
        Text with highlighted terms.
    """
    if not text or not terms:
        return text

    matches: list[tuple[int, int]] = []
    for term in terms:
        if not term or len(term) < 2:
            continue
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        matches.extend((match.start(), match.end()) for match in pattern.finditer(text))

    if not matches:
        return text

    # Sort by start position, then by length (longer matches first to prefer them)
    matches.sort(key=lambda x: (x[0], -(x[1] - x[0])))

    selected: list[tuple[int, int]] = []
    for start, end in matches:
        if selected and start < selected[-1][1]:
            continue
        selected.append((start, end))
        if max_highlights is not None and len(selected) >= max_highlights:
            break

    result = text
    for start, end in reversed(selected):
        matched_text = result[start:end]
        replacement = f"<mark>{matched_text}</mark>" if style == "html" else f"[[{matched_text}]]"
        result = result[:start] + replacement + result[end:]
    return result
