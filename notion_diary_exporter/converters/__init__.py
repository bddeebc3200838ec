"""Converters package: Notion rich text, blocks and page metadata to Markdown."""

from .rich_text import plain_text
from .block_converter import BlockConverter, block_to_markdown, blocks_to_markdown
from .entry_resolver import (
    EntryResolver,
    entry_anchor,
    entry_filename,
    normalize_date,
    slugify
)

__all__ = [
    'plain_text',
    'BlockConverter',
    'block_to_markdown',
    'blocks_to_markdown',
    'EntryResolver',
    'entry_anchor',
    'entry_filename',
    'normalize_date',
    'slugify'
]
