"""Notion block to Markdown conversion.

Each supported block kind has a small rendering method. Blocks arrive as a
pre-order flattened list, so a parent's children are rendered as the entries
that follow it rather than inside it (toggles included).
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional

from ..models import Block, BlockKind
from .rich_text import plain_text

HEADING_PREFIXES = {
    BlockKind.HEADING_1: '#',
    BlockKind.HEADING_2: '##',
    BlockKind.HEADING_3: '###',
}


class BlockConverter:
    """Converts single Notion blocks to Markdown snippets."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('notion_diary_exporter.converters.block_converter')
        self._handlers: Dict[BlockKind, Callable[[Block], str]] = {
            BlockKind.HEADING_1: self._convert_heading,
            BlockKind.HEADING_2: self._convert_heading,
            BlockKind.HEADING_3: self._convert_heading,
            BlockKind.PARAGRAPH: self._convert_paragraph,
            BlockKind.BULLETED_LIST_ITEM: self._convert_bulleted_item,
            BlockKind.NUMBERED_LIST_ITEM: self._convert_numbered_item,
            BlockKind.TO_DO: self._convert_to_do,
            BlockKind.QUOTE: self._convert_quote,
            BlockKind.CALLOUT: self._convert_callout,
            BlockKind.DIVIDER: self._convert_divider,
            BlockKind.CODE: self._convert_code,
            BlockKind.IMAGE: self._convert_image,
            BlockKind.TOGGLE: self._convert_toggle,
        }

    def convert(self, block: Block) -> str:
        """
        Convert one block to Markdown.

        Args:
            block: Block to convert

        Returns:
            Markdown snippet including its trailing newline(s). Unknown kinds
            produce an HTML comment naming the block type.
        """
        handler = self._handlers.get(block.kind)
        if handler is None:
            self.logger.debug(f"Unsupported block type '{block.type}' (ID: {block.id})")
            return f"<!-- unsupported block: {block.type} -->\n"
        return handler(block)

    def convert_all(self, blocks: Iterable[Block]) -> str:
        """Convert a flattened block sequence and concatenate the results."""
        return ''.join(self.convert(block) for block in blocks)

    @staticmethod
    def _text(block: Block) -> str:
        return plain_text(block.payload.get('rich_text'))

    def _convert_heading(self, block: Block) -> str:
        return f"{HEADING_PREFIXES[block.kind]} {self._text(block)}\n\n"

    def _convert_paragraph(self, block: Block) -> str:
        return f"{self._text(block)}\n\n"

    def _convert_bulleted_item(self, block: Block) -> str:
        return f"- {self._text(block)}\n"

    def _convert_numbered_item(self, block: Block) -> str:
        # Renderers renumber consecutive "1." items
        return f"1. {self._text(block)}\n"

    def _convert_to_do(self, block: Block) -> str:
        mark = 'x' if block.payload.get('checked') else ' '
        return f"- [{mark}] {self._text(block)}\n"

    def _convert_quote(self, block: Block) -> str:
        return f"> {self._text(block)}\n\n"

    def _convert_callout(self, block: Block) -> str:
        return f"> 💡 {self._text(block)}\n\n"

    def _convert_divider(self, block: Block) -> str:
        return "\n---\n\n"

    def _convert_code(self, block: Block) -> str:
        language = block.payload.get('language') or ''
        code = ''.join(
            span.get('plain_text') or ''
            for span in block.payload.get('rich_text') or []
            if isinstance(span, dict)
        )
        return f"\n```{language}\n{code}\n```\n\n"

    def _convert_image(self, block: Block) -> str:
        payload = block.payload
        if payload.get('type') == 'external':
            url = _get_url(payload.get('external'))
        else:
            url = _get_url(payload.get('file'))
        caption = plain_text(payload.get('caption')) or 'image'
        return f"![{caption}]({url})\n\n"

    def _convert_toggle(self, block: Block) -> str:
        return f"<details><summary>{self._text(block)}</summary>\n\n</details>\n\n"


def _get_url(source: Any) -> str:
    if isinstance(source, dict):
        return source.get('url') or ''
    return ''


_default_converter = BlockConverter()


def block_to_markdown(block: Block) -> str:
    """Convert one block with the shared default converter."""
    return _default_converter.convert(block)


def blocks_to_markdown(blocks: Iterable[Block]) -> str:
    """Convert a flattened block sequence with the shared default converter."""
    return _default_converter.convert_all(blocks)


__all__ = ['BlockConverter', 'block_to_markdown', 'blocks_to_markdown']
