"""
Orchestration package for the Fetch -> Convert -> Write export pipeline.
"""

from .export_orchestrator import ExportOrchestrator, export_json_report, format_console_report

__all__ = [
    'ExportOrchestrator',
    'export_json_report',
    'format_console_report'
]
