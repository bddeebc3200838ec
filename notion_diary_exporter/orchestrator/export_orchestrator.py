"""
Export orchestrator coordinating the diary export pipeline.

Sequence: Query pages → Resolve & sort entries → Build index →
Fetch & convert each page → Write per-entry files → Write combined file.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from ..converters import BlockConverter, EntryResolver
from ..exporters import FileSink, IndexGenerator, MarkdownExporter, resolve_body, sink_action
from ..fetchers import ApiFetcher, BaseFetcher
from ..logger import ProgressTracker, log_section
from ..models import DiaryEntry, ExportConfig


class ExportOrchestrator:
    """Central coordinator of a single, all-or-nothing export run."""

    def __init__(
        self,
        export_config: ExportConfig,
        fetcher: BaseFetcher,
        sink,
        logger: Optional[logging.Logger] = None,
        generated_at: Optional[datetime] = None
    ):
        """
        Initialize export orchestrator.

        Args:
            export_config: Validated export settings
            fetcher: Source of pages and block trees
            sink: Object with a ``write(key, content)`` method
            logger: Optional logger instance
            generated_at: Timestamp printed in the combined file (defaults to now, UTC)
        """
        self.export_config = export_config
        self.fetcher = fetcher
        self.sink = sink
        self.logger = logger or logging.getLogger('notion_diary_exporter.orchestrator')
        self.generated_at = generated_at

        self.resolver = EntryResolver(
            export_config.title_property,
            export_config.date_property,
            export_config.fallback_properties
        )
        self.converter = BlockConverter(self.logger)
        self.exporter = MarkdownExporter(sink, self.logger)

    @classmethod
    def from_config(cls, config: Dict[str, Any], sink=None,
                    logger: Optional[logging.Logger] = None) -> 'ExportOrchestrator':
        """
        Build an orchestrator wired to the Notion API and the configured output directory.

        Raises:
            ConfigurationError: If required settings are missing
        """
        export_config = ExportConfig.from_config(config)
        fetcher = ApiFetcher(config, logger)
        if sink is None:
            sink = FileSink(config.get('export', {}).get('output_directory', './diary'), logger)
        return cls(export_config, fetcher, sink, logger)

    def run(self) -> Dict[str, Any]:
        """
        Execute the export.

        The combined document is written last, in a single write, so any
        fetch or write failure leaves no combined file claiming completeness.

        Returns:
            Statistics dictionary

        Raises:
            FetcherError: On any remote failure
            OutputSinkError: On any write failure
        """
        start_time = time.time()
        config = self.export_config
        stats = {
            'pages_found': 0,
            'entries_exported': 0,
            'blocks_converted': 0,
            'fallback_bodies': 0,
            'empty_entries': 0,
            'files_written': [],
            'combined_file': None
        }

        log_section("Fetching pages")
        pages = self.fetcher.fetch_pages(
            config.database_id,
            config.title_property,
            config.date_property,
            config.filter_substring
        )
        stats['pages_found'] = len(pages)

        entries = self._resolve_entries(pages)

        generated_at = self.generated_at or datetime.now(timezone.utc)
        index = IndexGenerator(config.combined_title, generated_at)
        for entry in entries:
            index.add_index_entry(entry)

        log_section("Exporting entries")
        with ProgressTracker(total_items=len(entries), item_type='entries') as tracker:
            for entry in tqdm(entries, desc="Exporting", unit="entry", disable=not config.show_progress):
                blocks = self.fetcher.fetch_block_tree(entry.page_id)
                body = resolve_body(entry, self.converter.convert_all(blocks))

                if blocks:
                    stats['blocks_converted'] += len(blocks)
                elif body == entry.fallback_body:
                    stats['fallback_bodies'] += 1
                else:
                    stats['empty_entries'] += 1

                stats['files_written'].append(self.exporter.export_entry(entry, body))
                index.add_section(entry, body)
                stats['entries_exported'] += 1
                tracker.increment()

        self.sink.write(config.combined_filename, index.render())
        stats['combined_file'] = config.combined_filename
        self.logger.info(f"{sink_action(self.sink)} combined: {config.combined_filename} ({index.section_count} entries)")

        stats['duration_seconds'] = time.time() - start_time
        self._log_export_summary(stats)
        return stats

    def _resolve_entries(self, pages) -> List[DiaryEntry]:
        """Resolve entries and order them oldest first (stable on equal dates)."""
        entries = [self.resolver.resolve(page) for page in pages]
        return sorted(entries, key=lambda entry: entry.date)

    def _log_export_summary(self, stats: Dict[str, Any]) -> None:
        """Log final export statistics."""
        self.logger.info("=" * 60)
        self.logger.info("DIARY EXPORT SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Pages found: {stats['pages_found']}")
        self.logger.info(f"Entries exported: {stats['entries_exported']}")
        self.logger.info(f"Blocks converted: {stats['blocks_converted']}")
        self.logger.info(f"Entries using fallback text: {stats['fallback_bodies']}")
        self.logger.info(f"Entries without content: {stats['empty_entries']}")
        self.logger.info(f"Duration: {stats['duration_seconds']:.2f}s")
        self.logger.info("=" * 60)


__all__ = ['ExportOrchestrator']
