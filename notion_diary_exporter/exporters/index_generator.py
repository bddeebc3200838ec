"""Combined markdown document with a linked table of contents."""

from datetime import datetime
from typing import List

from ..models import DiaryEntry

TOC_ANCHOR = 'toc'
TOC_HEADING = '目次'
BACK_LINK_LABEL = '↥ 目次へ'
GENERATED_LABEL = '自動生成日時'


class IndexGenerator:
    """
    Accumulates the combined document.

    The table of contents is built first from every entry, then sections are
    appended in the same order. Nothing is written until ``render`` is called,
    so a failed run never leaves a partial combined file behind.
    """

    def __init__(self, title: str, generated_at: datetime):
        self.title = title
        self.generated_at = generated_at
        self._index_lines: List[str] = []
        self._sections: List[str] = []

    def add_index_entry(self, entry: DiaryEntry) -> str:
        """Add a TOC line linking to the entry's anchor; returns the line."""
        line = f"- [{entry.heading}](#{entry.anchor})\n"
        self._index_lines.append(line)
        return line

    def add_section(self, entry: DiaryEntry, body: str) -> None:
        """Append an anchored entry section followed by a link back to the TOC."""
        self._sections.append(
            f"\n<a id=\"{entry.anchor}\"></a>\n\n"
            f"## {entry.heading}\n\n"
            f"{body}"
            f"\n[{BACK_LINK_LABEL}](#{TOC_ANCHOR})\n\n---\n"
        )

    @property
    def section_count(self) -> int:
        return len(self._sections)

    def render(self) -> str:
        """Assemble header, table of contents and sections."""
        parts = [
            f"# {self.title}\n\n",
            f"> {GENERATED_LABEL}: {self.generated_at.isoformat()}\n\n",
            "---\n\n",
            f"<a id=\"{TOC_ANCHOR}\"></a>\n\n",
            f"## {TOC_HEADING}\n\n",
        ]
        parts.extend(self._index_lines)
        parts.append("\n---\n\n")
        parts.extend(self._sections)
        return ''.join(parts)


__all__ = ['IndexGenerator', 'TOC_ANCHOR', 'TOC_HEADING', 'BACK_LINK_LABEL']
