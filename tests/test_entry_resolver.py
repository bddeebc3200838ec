"""Tests for entry metadata resolution and output naming."""

import unittest

from notion_diary_exporter.converters.entry_resolver import (
    EntryResolver,
    entry_anchor,
    entry_filename,
    normalize_date,
    slugify
)
from notion_diary_exporter.models import DiaryEntry, Page

from notion_fixtures import make_page, rich


class TestEntryResolver(unittest.TestCase):
    def setUp(self):
        self.resolver = EntryResolver('タイトル', '日付')

    def resolve(self, raw):
        return self.resolver.resolve(Page.from_api(raw))

    def test_title_and_date(self):
        entry = self.resolve(make_page('p1', '3行日記 5/1', '2024-05-01'))
        self.assertEqual(entry.page_id, 'p1')
        self.assertEqual(entry.title, '3行日記 5/1')
        self.assertEqual(entry.date, '2024-05-01')

    def test_date_colons_are_replaced(self):
        entry = self.resolve(make_page('p1', 'x', '2024-05-01T09:30:00'))
        self.assertEqual(entry.date, '2024-05-01T09-30-00')

    def test_missing_title_and_date_defaults(self):
        entry = self.resolve(make_page('p1'))
        self.assertEqual(entry.title, 'untitled')
        self.assertEqual(entry.date, 'unknown')

    def test_missing_properties_entirely(self):
        entry = self.resolve({'id': 'p1'})
        self.assertEqual(entry.title, 'untitled')
        self.assertEqual(entry.date, 'unknown')
        self.assertEqual(entry.fallback_body, '')

    def test_fallback_body_uses_first_non_empty_candidate(self):
        raw = make_page('p1', 't', '2024-05-01', 内容='second', Body='later')
        raw['properties']['本文'] = {'type': 'rich_text', 'rich_text': []}
        entry = self.resolve(raw)
        self.assertEqual(entry.fallback_body, 'second\n\n')

    def test_fallback_body_ignores_non_rich_text_properties(self):
        raw = make_page('p1', 't', '2024-05-01')
        raw['properties']['本文'] = {'type': 'title', 'title': rich('not body')}
        raw['properties']['Content'] = {'type': 'rich_text', 'rich_text': rich('body')}
        self.assertEqual(self.resolve(raw).fallback_body, 'body\n\n')

    def test_no_fallback_body(self):
        self.assertEqual(self.resolve(make_page('p1', 't', '2024-05-01')).fallback_body, '')

    def test_custom_property_names(self):
        resolver = EntryResolver('Name', 'Day', fallback_properties=['Notes'])
        page = Page(id='p1', properties={
            'Name': {'type': 'title', 'title': rich('Hello')},
            'Day': {'type': 'date', 'date': {'start': '2023-01-02'}},
            'Notes': {'type': 'rich_text', 'rich_text': rich('n')},
        })
        entry = resolver.resolve(page)
        self.assertEqual((entry.title, entry.date, entry.fallback_body), ('Hello', '2023-01-02', 'n\n\n'))


class TestNaming(unittest.TestCase):
    def test_slugify(self):
        self.assertEqual(slugify('Hello World'), 'hello-world')
        self.assertEqual(slugify('  Trip -- to  Kyoto! '), 'trip-to-kyoto')
        self.assertEqual(slugify('Café Crème'), 'cafe-creme')
        self.assertEqual(slugify('３行日記'), '')
        self.assertEqual(slugify('日記'), '')
        self.assertEqual(slugify(''), '')
        self.assertEqual(slugify(None), '')

    def test_slugify_spells_out_symbols(self):
        self.assertEqual(slugify('Q&A'), 'qanda')
        self.assertEqual(slugify('5$ lunch'), '5dollar-lunch')
        self.assertEqual(slugify('Straße'), 'strasse')
        self.assertEqual(slugify('Smørrebrød'), 'smorrebrod')
        self.assertEqual(slugify('© 2024'), 'c-2024')

    def test_normalize_date(self):
        self.assertEqual(normalize_date('2024-05-01T09:30:00'), '2024-05-01T09-30-00')
        self.assertEqual(normalize_date('2024-05-01'), '2024-05-01')
        self.assertEqual(normalize_date(None), 'unknown')
        self.assertEqual(normalize_date(''), 'unknown')

    def test_entry_filename(self):
        self.assertEqual(entry_filename('2024-05-01', '3行日記 5/1'), '2024-05-01_3-51.md')
        self.assertEqual(entry_filename('2024-05-01', '日記'), '2024-05-01_note.md')
        self.assertEqual(entry_filename('unknown', 'untitled'), 'unknown_untitled.md')

    def test_entry_anchor_is_deterministic(self):
        first = entry_anchor('2024-05-01', '3行日記 5/1')
        self.assertEqual(first, '2024-05-01-3-51')
        self.assertEqual(entry_anchor('2024-05-01', '3行日記 5/1'), first)

    def test_anchor_fallback(self):
        self.assertEqual(entry_anchor('', '日記'), 'entry')

    def test_diary_entry_properties(self):
        entry = DiaryEntry(page_id='p', title='Morning Walk', date='2024-05-01T07-00-00')
        self.assertEqual(entry.filename, '2024-05-01T07-00-00_morning-walk.md')
        self.assertEqual(entry.anchor, '2024-05-01t07-00-00-morning-walk')
        self.assertEqual(entry.heading, '2024-05-01T07-00-00 Morning Walk')


if __name__ == '__main__':
    unittest.main()
