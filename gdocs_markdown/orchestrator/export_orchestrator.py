"""
Export orchestrator coordinating the batch pipeline.

Each requested document goes through Fetch -> Convert -> Write. A failure
in any phase is recorded for that document only and the batch continues.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from ..converters import MarkdownConverter
from ..exporters import ExportError, MarkdownExporter
from ..fetchers import BaseFetcher, FetcherError, FetcherFactory
from ..logger import ProgressTracker, log_section
from ..models import ExportRequest, ExportStatus


class ExportOrchestrator:
    """Central coordinator sequencing fetch, conversion and file export per document."""

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        fetcher: Optional[BaseFetcher] = None,
        exporter: Optional[MarkdownExporter] = None,
        converter: Optional[MarkdownConverter] = None
    ):
        """
        Initialize export orchestrator.

        Args:
            config: Configuration dictionary
            logger: Optional logger instance
            fetcher: Document source, created from config when omitted
            exporter: File sink, created from config when omitted
            converter: Markdown converter, created when omitted
        """
        self.config = config
        self.logger = logger or logging.getLogger('gdocs_markdown.orchestrator')
        self.fetcher = fetcher or FetcherFactory.create_fetcher(config, self.logger)
        self.exporter = exporter or MarkdownExporter(config, self.logger)
        self.converter = converter or MarkdownConverter(self.logger)
        self.dry_run = config.get('fetch', {}).get('dry_run', False)

    def run(self, requests: Iterable[ExportRequest], show_progress: bool = True) -> Dict[str, Any]:
        """
        Export every requested document.

        Args:
            requests: Documents to export
            show_progress: Display a progress bar

        Returns:
            Report dictionary with a summary and one status per document
        """
        requests = list(requests)
        log_section("Exporting documents")
        start_time = time.time()

        statuses: List[ExportStatus] = []
        with ProgressTracker(total_items=len(requests), item_type='documents') as tracker:
            for request in tqdm(requests, desc="Exporting documents", unit="doc", disable=not show_progress):
                status = self.export_one(request)
                statuses.append(status)
                tracker.increment(success=status.status != 'failed')

        return self._generate_report(statuses, time.time() - start_time)

    def export_one(self, request: ExportRequest) -> ExportStatus:
        """Run the pipeline for one document, capturing any failure in the status."""
        status = ExportStatus(document_id=request.document_id, status='pending')

        try:
            document = self.fetcher.fetch_document(request.document_id)
            status.status = 'fetched'
            status.title = document.title

            markdown = self.converter.convert(document)
            status.status = 'converted'

            if self.dry_run:
                filename = self.exporter.resolve_filename(document, request.filename)
                status.output_path = str(self.exporter.output_directory / filename)
                self.logger.info(f"Dry run: would write {document.title} to {status.output_path}")
                return status

            path = self.exporter.export_document(document, markdown, request.filename)
            if path is None:
                status.status = 'skipped'
            else:
                status.status = 'exported'
                status.output_path = str(path)
                self.logger.info(f"Downloaded document {document.title}")

        except (FetcherError, ExportError) as e:
            self.logger.error(f"Failed to export document {request.document_id}: {str(e)}")
            status.status = 'failed'
            status.error_message = str(e)
        except Exception as e:
            self.logger.error(f"Unexpected error exporting document {request.document_id}: {str(e)}", exc_info=True)
            status.status = 'failed'
            status.error_message = str(e)

        return status

    def _generate_report(self, statuses: List[ExportStatus], duration: float) -> Dict[str, Any]:
        counts: Dict[str, int] = {}
        for status in statuses:
            counts[status.status] = counts.get(status.status, 0) + 1

        summary = {
            'total_documents': len(statuses),
            'exported': counts.get('exported', 0),
            'converted': counts.get('converted', 0),
            'skipped': counts.get('skipped', 0),
            'total_errors': counts.get('failed', 0),
            'dry_run': self.dry_run,
            'duration_seconds': round(duration, 3)
        }
        self.logger.info(
            f"Export complete: {summary['exported']} exported, {summary['skipped']} skipped, "
            f"{summary['total_errors']} failed in {duration:.2f}s"
        )

        return {
            'summary': summary,
            'exporter': self.exporter.get_stats(),
            'documents': [status.to_dict() for status in statuses]
        }


def format_console_report(report: Dict[str, Any]) -> str:
    """Render a short plain-text report for the terminal."""
    summary = report.get('summary', {})
    lines = [
        "=" * 60,
        "EXPORT REPORT" + (" (DRY RUN)" if summary.get('dry_run') else ""),
        "=" * 60,
        f"Documents: {summary.get('total_documents', 0)}",
        f"Exported: {summary.get('exported', 0)}",
        f"Skipped: {summary.get('skipped', 0)}",
        f"Failed: {summary.get('total_errors', 0)}",
    ]

    failures = [doc for doc in report.get('documents', []) if doc.get('status') == 'failed']
    if failures:
        lines.append("-" * 60)
        for doc in failures:
            lines.append(f"  {doc['document_id']}: {doc.get('error_message')}")

    lines.append("=" * 60)
    return '\n'.join(lines)


def export_json_report(report: Dict[str, Any], report_path: str) -> None:
    """Write the report as JSON."""
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2, ensure_ascii=False)


__all__ = ['ExportOrchestrator', 'export_json_report', 'format_console_report']
