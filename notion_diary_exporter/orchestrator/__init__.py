"""
Orchestration package sequencing the export pipeline:
Fetch → Convert → Write per-entry files → Write combined file.
"""

from .export_orchestrator import ExportOrchestrator

__all__ = ['ExportOrchestrator']
