"""Per-entry markdown documents."""

import logging
from typing import Optional

from ..models import DiaryEntry
from .output_sink import sink_action

logger = logging.getLogger('notion_diary_exporter.exporters.markdown_exporter')

EMPTY_BODY_PLACEHOLDER = '_（本文なし）_\n'


def resolve_body(entry: DiaryEntry, rendered_blocks: str) -> str:
    """
    Pick the body of an entry.

    Args:
        entry: Resolved entry
        rendered_blocks: Markdown of the page's block tree ("" if it had no blocks)

    Returns:
        The rendered blocks, else the fallback property text, else a placeholder
    """
    if rendered_blocks:
        return rendered_blocks
    if entry.fallback_body:
        logger.debug(f"Page {entry.page_id} has no blocks, using fallback property text")
        return entry.fallback_body
    logger.debug(f"Page {entry.page_id} has no content, using placeholder")
    return EMPTY_BODY_PLACEHOLDER


def render_entry_document(entry: DiaryEntry, body: str) -> str:
    """Full text of a per-entry file: title heading, date line, body."""
    return f"# {entry.title}\n\n- Date: {entry.date}\n\n{body}"


class MarkdownExporter:
    """Writes one markdown file per diary entry to an output sink."""

    def __init__(self, sink, logger: Optional[logging.Logger] = None):
        """
        Initialize the exporter.

        Args:
            sink: Object with a ``write(key, content)`` method
            logger: Logger instance
        """
        self.sink = sink
        self.logger = logger or logging.getLogger('notion_diary_exporter.exporters.markdown_exporter')

    def export_entry(self, entry: DiaryEntry, body: str) -> str:
        """Write the entry's file and return its key."""
        key = entry.filename
        self.sink.write(key, render_entry_document(entry, body))
        self.logger.info(f"{sink_action(self.sink)}: {key}")
        return key


__all__ = [
    'EMPTY_BODY_PLACEHOLDER',
    'resolve_body',
    'render_entry_document',
    'MarkdownExporter'
]
