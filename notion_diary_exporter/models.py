"""Data models for the Notion diary export pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

DEFAULT_FALLBACK_PROPERTIES: Tuple[str, ...] = ('本文', '内容', 'テキスト', 'Body', 'Content')


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""
    pass


class BlockKind(Enum):
    """Block kinds with a dedicated markdown rendering."""
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    PARAGRAPH = "paragraph"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    CODE = "code"
    IMAGE = "image"
    TOGGLE = "toggle"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_type(cls, block_type: Optional[str]) -> 'BlockKind':
        """Map a raw Notion block type to a kind, UNSUPPORTED when unknown."""
        try:
            return cls(block_type)
        except ValueError:
            return cls.UNSUPPORTED


@dataclass
class RichTextSpan:
    """One run of Notion rich text."""

    plain_text: str = ''
    type: str = 'text'
    href: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RichTextSpan':
        """Build a span from an API rich text object, tolerating missing keys."""
        return cls(
            plain_text=data.get('plain_text') or '',
            type=data.get('type') or 'text',
            href=data.get('href')
        )


@dataclass
class Block:
    """A single content node of a page body.

    ``payload`` is the kind-specific object Notion stores under the key named
    by ``type`` (``block["paragraph"]`` for a paragraph, and so on).
    """

    id: str
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    has_children: bool = False

    @property
    def kind(self) -> BlockKind:
        return BlockKind.from_type(self.type)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Block':
        """Build a block from a ``blocks.children.list`` result item."""
        block_type = data.get('type') or 'unknown'
        payload = data.get(block_type)
        if not isinstance(payload, dict):
            payload = {}
        return cls(
            id=data.get('id', ''),
            type=block_type,
            payload=payload,
            has_children=bool(data.get('has_children', False))
        )


@dataclass
class Page:
    """A database row (diary page) with its raw properties."""

    id: str
    properties: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    url: Optional[str] = None
    created_time: Optional[str] = None
    last_edited_time: Optional[str] = None

    def get_property(self, name: str) -> Dict[str, Any]:
        """Return the named property, or an empty dict when it is missing."""
        prop = self.properties.get(name)
        return prop if isinstance(prop, dict) else {}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Page':
        """Build a page from a database query result item."""
        properties = data.get('properties')
        return cls(
            id=data.get('id', ''),
            properties=properties if isinstance(properties, dict) else {},
            url=data.get('url'),
            created_time=data.get('created_time'),
            last_edited_time=data.get('last_edited_time')
        )


@dataclass
class DiaryEntry:
    """Resolved metadata of one page, ready to be rendered."""

    page_id: str
    title: str
    date: str
    fallback_body: str = ''

    @property
    def filename(self) -> str:
        from .converters.entry_resolver import entry_filename
        return entry_filename(self.date, self.title)

    @property
    def anchor(self) -> str:
        from .converters.entry_resolver import entry_anchor
        return entry_anchor(self.date, self.title)

    @property
    def heading(self) -> str:
        return f"{self.date} {self.title}"


@dataclass
class ExportConfig:
    """Settings the export orchestrator needs, resolved from configuration."""

    database_id: str
    title_property: str = 'タイトル'
    date_property: str = '日付'
    filter_substring: Optional[str] = '3行日記'
    fallback_properties: Tuple[str, ...] = DEFAULT_FALLBACK_PROPERTIES
    combined_filename: str = '_all.md'
    combined_title: str = '3行日記（全件まとめ）'
    show_progress: bool = True

    def __post_init__(self) -> None:
        """Validate required settings."""
        for name in ('database_id', 'title_property', 'date_property', 'combined_filename'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"Missing required export setting: {name}")
        # An empty substring would match every page; treat it as "filter disabled"
        if not self.filter_substring:
            self.filter_substring = None
        self.fallback_properties = tuple(self.fallback_properties)

    @property
    def filtered(self) -> bool:
        return self.filter_substring is not None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ExportConfig':
        """Build from a loaded configuration dictionary."""
        notion_config = config.get('notion', {}) or {}
        export_config = config.get('export', {}) or {}

        only_matching = export_config.get('only_matching', True)
        filter_substring = export_config.get('filter_substring', '3行日記') if only_matching else None

        # An explicit empty list turns the fallback off
        fallback_properties = export_config.get('fallback_properties')
        if fallback_properties is None:
            fallback_properties = DEFAULT_FALLBACK_PROPERTIES

        return cls(
            database_id=notion_config.get('database_id') or '',
            title_property=export_config.get('title_property', 'タイトル'),
            date_property=export_config.get('date_property', '日付'),
            filter_substring=filter_substring,
            fallback_properties=tuple(fallback_properties),
            combined_filename=export_config.get('combined_filename', '_all.md'),
            combined_title=export_config.get('combined_title', '3行日記（全件まとめ）'),
            show_progress=bool(export_config.get('show_progress', True))
        )


__all__ = [
    'DEFAULT_FALLBACK_PROPERTIES',
    'ConfigurationError',
    'BlockKind',
    'RichTextSpan',
    'Block',
    'Page',
    'DiaryEntry',
    'ExportConfig'
]
