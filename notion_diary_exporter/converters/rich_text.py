"""Plain text extraction from Notion rich text arrays."""

from typing import Any, Iterable, Mapping, Optional, Union

from ..models import RichTextSpan

SpanLike = Union[RichTextSpan, Mapping[str, Any]]


def plain_text(spans: Optional[Iterable[SpanLike]]) -> str:
    """
    Concatenate the plain text of every span, in order, without separators.

    Args:
        spans: RichTextSpan objects or raw API rich text dicts (may be None)

    Returns:
        Joined text, empty string for empty or missing input
    """
    if not spans:
        return ''

    parts = []
    for span in spans:
        if isinstance(span, RichTextSpan):
            parts.append(span.plain_text or '')
        elif isinstance(span, Mapping):
            parts.append(span.get('plain_text') or '')
    return ''.join(parts)


__all__ = ['plain_text']
