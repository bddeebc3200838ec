"""Markdown export package for the Notion diary exporter.

Package Structure:
- output_sink: File and in-memory sinks keyed by relative path
- markdown_exporter: Per-entry documents and body fallback rules
- index_generator: Combined document with a table of contents and anchors
"""

from .output_sink import FileSink, MemorySink, OutputSinkError, sink_action
from .markdown_exporter import (
    EMPTY_BODY_PLACEHOLDER,
    MarkdownExporter,
    render_entry_document,
    resolve_body
)
from .index_generator import IndexGenerator

__all__ = [
    'FileSink',
    'MemorySink',
    'OutputSinkError',
    'sink_action',
    'EMPTY_BODY_PLACEHOLDER',
    'MarkdownExporter',
    'render_entry_document',
    'resolve_body',
    'IndexGenerator'
]
