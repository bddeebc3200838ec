"""Output sinks: where rendered markdown documents are written."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union


class OutputSinkError(Exception):
    """Raised when a document cannot be written."""
    pass


class FileSink:
    """Writes documents as UTF-8 files below an output directory."""

    action = 'Wrote'

    def __init__(self, output_directory: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.output_directory = Path(output_directory)
        self.logger = logger or logging.getLogger('notion_diary_exporter.exporters.output_sink')
        self.written: List[Path] = []

    def write(self, key: str, content: str) -> Path:
        """
        Write ``content`` to ``output_directory/key``, replacing any existing file.

        Args:
            key: Relative file path
            content: Document text

        Returns:
            Path of the written file

        Raises:
            OutputSinkError: If the directory or file cannot be written
        """
        path = self.output_directory / key

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"OS error creating directory {path.parent}: {e}")
            raise OutputSinkError(f"Cannot create directory {path.parent}: {e}") from e

        try:
            path.write_text(content, encoding='utf-8')
        except PermissionError as e:
            self.logger.error(f"Permission denied writing to {path}: {e}")
            raise OutputSinkError(f"Permission denied: {path}") from e
        except OSError as e:
            self.logger.error(f"IO error writing to {path}: {e}")
            raise OutputSinkError(f"IO error writing {path}: {e}") from e

        self.written.append(path)
        self.logger.debug(f"Successfully wrote {len(content)} characters to {path}")
        return path


class MemorySink:
    """Keeps documents in memory; used for dry runs."""

    action = 'Rendered'

    def __init__(self):
        self.documents: Dict[str, str] = {}

    def write(self, key: str, content: str) -> str:
        self.documents[key] = content
        return key


def sink_action(sink) -> str:
    """Past-tense verb describing what a sink did with a document, for log lines."""
    return getattr(sink, 'action', 'Wrote')


__all__ = ['OutputSinkError', 'FileSink', 'MemorySink', 'sink_action']
