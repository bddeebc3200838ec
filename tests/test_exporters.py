"""Tests for output sinks, per-entry documents and the combined index."""

import unittest
from datetime import datetime, timezone
from pathlib import Path
import tempfile
from unittest import mock

from notion_diary_exporter.exporters import (
    EMPTY_BODY_PLACEHOLDER,
    FileSink,
    IndexGenerator,
    MarkdownExporter,
    MemorySink,
    OutputSinkError,
    render_entry_document,
    resolve_body
)
from notion_diary_exporter.models import DiaryEntry


class TestFileSink(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_creates_directories_and_overwrites(self):
        sink = FileSink(self.root / 'nested' / 'diary')
        sink.write('a.md', 'first')
        path = sink.write('a.md', '二回目')

        self.assertEqual(path.read_text(encoding='utf-8'), '二回目')
        self.assertEqual(len(sink.written), 2)

    def test_unwritable_target_raises(self):
        blocker = self.root / 'blocker'
        blocker.write_text('not a directory', encoding='utf-8')
        sink = FileSink(blocker)

        with self.assertRaises(OutputSinkError):
            sink.write('a.md', 'x')

    def test_memory_sink(self):
        sink = MemorySink()
        sink.write('a.md', 'x')
        sink.write('a.md', 'y')
        self.assertEqual(sink.documents, {'a.md': 'y'})


class TestEntryDocument(unittest.TestCase):
    def setUp(self):
        self.entry = DiaryEntry(page_id='p', title='Walk', date='2024-05-01', fallback_body='from property\n\n')

    def test_render(self):
        self.assertEqual(
            render_entry_document(self.entry, 'body\n\n'),
            '# Walk\n\n- Date: 2024-05-01\n\nbody\n\n'
        )

    def test_body_precedence(self):
        self.assertEqual(resolve_body(self.entry, 'blocks\n\n'), 'blocks\n\n')
        self.assertEqual(resolve_body(self.entry, ''), 'from property\n\n')
        empty = DiaryEntry(page_id='p', title='Walk', date='2024-05-01')
        self.assertEqual(resolve_body(empty, ''), EMPTY_BODY_PLACEHOLDER)


class TestMarkdownExporterLogging(unittest.TestCase):
    def setUp(self):
        self.entry = DiaryEntry(page_id='p', title='Walk', date='2024-05-01')
        self.logger = mock.Mock()

    def test_dry_run_logs_rendered(self):
        MarkdownExporter(MemorySink(), self.logger).export_entry(self.entry, 'x\n\n')
        self.logger.info.assert_called_once_with('Rendered: 2024-05-01_walk.md')

    def test_file_sink_logs_wrote(self):
        with tempfile.TemporaryDirectory() as tmp:
            MarkdownExporter(FileSink(tmp), self.logger).export_entry(self.entry, 'x\n\n')
        self.logger.info.assert_called_once_with('Wrote: 2024-05-01_walk.md')


class TestIndexGenerator(unittest.TestCase):
    def test_index_links_match_section_anchors(self):
        entries = [
            DiaryEntry(page_id='1', title='Rain', date='2024-05-01'),
            DiaryEntry(page_id='2', title='Sun', date='2024-05-02'),
        ]
        index = IndexGenerator('Diary', datetime(2024, 5, 3, tzinfo=timezone.utc))
        lines = [index.add_index_entry(entry) for entry in entries]
        for entry in entries:
            index.add_section(entry, f"{entry.title} body\n\n")

        document = index.render()

        self.assertEqual(lines[0], '- [2024-05-01 Rain](#2024-05-01-rain)\n')
        self.assertIn('<a id="2024-05-01-rain"></a>\n\n## 2024-05-01 Rain\n\nRain body\n\n', document)
        self.assertTrue(document.startswith('# Diary\n\n> 自動生成日時: 2024-05-03T00:00:00+00:00\n\n'))
        self.assertLess(document.index('## 目次'), document.index('<a id="2024-05-01-rain">'))
        self.assertEqual(index.section_count, 2)

    def test_colliding_anchors_are_kept(self):
        index = IndexGenerator('Diary', datetime(2024, 5, 3, tzinfo=timezone.utc))
        first = index.add_index_entry(DiaryEntry(page_id='1', title='日記', date='2024-05-01'))
        second = index.add_index_entry(DiaryEntry(page_id='2', title='メモ', date='2024-05-01'))
        self.assertEqual(first.split('](')[1], second.split('](')[1])


if __name__ == '__main__':
    unittest.main()
