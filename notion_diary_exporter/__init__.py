"""
Notion Diary Exporter

Exports diary entries from a Notion database into flat markdown files.

Features:
- Cursor-paginated database queries, optionally filtered by title text
- Full page bodies, nested blocks flattened in document order
- Block conversion for headings, lists, to-dos, quotes, callouts, code,
  images, toggles and dividers (unsupported blocks left as HTML comments)
- Fallback to rich text properties when a page body is empty
- One file per entry plus a combined file with a linked table of contents
- YAML configuration with ${ENV_VAR} substitution

Basic Usage:
    1. Export NOTION_TOKEN and NOTION_DATABASE_ID, or copy
       config.yaml.example to config.yaml and fill it in
    2. Run: notion-diary-export
    3. Full export instead of the title filter: notion-diary-export --all

Example Configuration (config.yaml):
    notion:
        token: ${NOTION_TOKEN}
        database_id: ${NOTION_DATABASE_ID}

    export:
        output_directory: "./diary"
        title_property: "タイトル"
        date_property: "日付"
"""

__version__ = "1.0.0"
__description__ = "Notion diary database to markdown exporter"

from .models import (
    Block,
    BlockKind,
    ConfigurationError,
    DiaryEntry,
    ExportConfig,
    Page,
    RichTextSpan
)
from .config_loader import ConfigLoader, get_nested
from .logger import setup_logging, ProgressTracker, log_section, log_config
from .orchestrator import ExportOrchestrator

__all__ = [
    '__version__',
    '__description__',

    # Core data models
    'Block',
    'BlockKind',
    'ConfigurationError',
    'DiaryEntry',
    'ExportConfig',
    'Page',
    'RichTextSpan',

    # Configuration
    'ConfigLoader',
    'get_nested',

    # Logging
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config',

    # Pipeline
    'ExportOrchestrator',
]
