"""Resolve page metadata (title, date, fallback body) and output names."""

import logging
import re
import unicodedata
from typing import Any, Iterable, Optional

from ..models import DEFAULT_FALLBACK_PROPERTIES, DiaryEntry, Page
from .rich_text import plain_text

logger = logging.getLogger('notion_diary_exporter.converters.entry_resolver')

UNTITLED = 'untitled'
UNKNOWN_DATE = 'unknown'
DEFAULT_FILE_SLUG = 'note'
DEFAULT_ANCHOR = 'entry'


# Symbols and letters that spell out or transliterate instead of being dropped
SLUG_CHAR_MAP = {
    '$': 'dollar',
    '%': 'percent',
    '&': 'and',
    '<': 'less',
    '>': 'greater',
    '|': 'or',
    '¢': 'cent',
    '£': 'pound',
    '¤': 'currency',
    '¥': 'yen',
    '€': 'euro',
    '©': '(c)',
    '®': '(r)',
    'ª': 'a',
    'º': 'o',
    'Æ': 'AE',
    'æ': 'ae',
    'Ð': 'D',
    'ð': 'd',
    'Đ': 'DJ',
    'đ': 'dj',
    'Ł': 'L',
    'ł': 'l',
    'Ø': 'O',
    'ø': 'o',
    'Œ': 'OE',
    'œ': 'oe',
    'Þ': 'TH',
    'þ': 'th',
    'ß': 'ss',
}


def slugify(text: Optional[str]) -> str:
    """
    Convert text to a lowercase URL/filename-safe slug.

    Symbols in SLUG_CHAR_MAP are spelled out, accents are stripped and only
    ASCII letters and digits survive; hyphens and whitespace runs become
    single hyphens. Text without any ASCII alphanumerics (e.g. pure Japanese,
    full-width digits included) yields an empty string.

    Args:
        text: Arbitrary text

    Returns:
        Slug, possibly empty
    """
    if not text:
        return ''

    mapped = ''.join(
        SLUG_CHAR_MAP.get(ch, ch) for ch in unicodedata.normalize('NFC', text)
    )
    # NFD splits accented letters into base letter plus combining mark
    normalized = unicodedata.normalize('NFD', mapped)
    normalized = normalized.replace('-', ' ')
    normalized = re.sub(r'[^A-Za-z0-9\s]', '', normalized)
    return re.sub(r'\s+', '-', normalized.strip()).lower()


def normalize_date(value: Optional[str]) -> str:
    """Make a date string filesystem-safe by replacing colons with hyphens."""
    if not value:
        return UNKNOWN_DATE
    return value.replace(':', '-')


def entry_filename(date: str, title: str) -> str:
    """Per-entry file name: ``{date}_{slug(title)}.md``."""
    slug = slugify(title) or DEFAULT_FILE_SLUG
    return f"{date}_{slug}.md"


def entry_anchor(date: str, title: str) -> str:
    """Anchor id of an entry section inside the combined document."""
    return slugify(f"{date}-{title}") or DEFAULT_ANCHOR


class EntryResolver:
    """Derives DiaryEntry metadata from raw page properties."""

    def __init__(
        self,
        title_property: str,
        date_property: str,
        fallback_properties: Iterable[str] = DEFAULT_FALLBACK_PROPERTIES
    ):
        """
        Initialize resolver with the deployment's property names.

        Args:
            title_property: Name of the title-typed property
            date_property: Name of the date-typed property
            fallback_properties: Rich text properties to try, in order, when
                the page body has no blocks
        """
        self.title_property = title_property
        self.date_property = date_property
        self.fallback_properties = tuple(fallback_properties)

    def resolve(self, page: Page) -> DiaryEntry:
        """Resolve title, normalized date and fallback body of a page."""
        return DiaryEntry(
            page_id=page.id,
            title=self.get_title(page),
            date=self.get_date(page),
            fallback_body=self.get_fallback_body(page)
        )

    def get_title(self, page: Page) -> str:
        title = plain_text(_as_list(page.get_property(self.title_property).get('title')))
        if not title:
            logger.debug(f"Page {page.id} has no '{self.title_property}' text, using '{UNTITLED}'")
            return UNTITLED
        return title

    def get_date(self, page: Page) -> str:
        date_value = page.get_property(self.date_property).get('date')
        start = date_value.get('start') if isinstance(date_value, dict) else None
        if not start:
            logger.debug(f"Page {page.id} has no '{self.date_property}' start date")
        return normalize_date(start)

    def get_fallback_body(self, page: Page) -> str:
        """
        Text of the first non-empty rich text candidate property.

        Returns:
            Property text followed by a blank line, or an empty string when no
            candidate matches (the caller substitutes a placeholder)
        """
        for name in self.fallback_properties:
            prop = page.get_property(name)
            if prop.get('type') != 'rich_text':
                continue
            text = plain_text(_as_list(prop.get('rich_text')))
            if text:
                return f"{text}\n\n"
        return ''


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


__all__ = [
    'UNTITLED',
    'UNKNOWN_DATE',
    'EntryResolver',
    'slugify',
    'normalize_date',
    'entry_filename',
    'entry_anchor'
]
