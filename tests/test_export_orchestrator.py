"""Tests for the batch export pipeline and its reports."""

import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from gdocs_markdown.exporters import MarkdownExporter
from gdocs_markdown.fetchers import BaseFetcher, DocumentNotFoundError
from gdocs_markdown.models import ExportRequest
from gdocs_markdown.orchestrator import (
    ExportOrchestrator,
    export_json_report,
    format_console_report
)


def api_document(document_id, title):
    return {
        'title': title,
        'documentId': document_id,
        'revisionId': 'rev',
        'body': {'content': [{'paragraph': {'elements': [{'textRun': {'content': 'Body\n'}}]}}]},
    }


class StubFetcher(BaseFetcher):
    """Serves documents from an in-memory mapping."""

    def __init__(self, documents):
        super().__init__({})
        self.documents = documents

    def fetch_document_data(self, document_id):
        if document_id not in self.documents:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        data = self.documents[document_id]
        if isinstance(data, Exception):
            raise data
        return data


class TestExportOrchestrator(unittest.TestCase):
    def setUp(self):
        self.temp_dir = TemporaryDirectory()
        self.output_dir = Path(self.temp_dir.name)
        self.fetcher = StubFetcher({
            'doc-1': api_document('doc-1', 'First'),
            'doc-2': api_document('doc-2', 'Second'),
            'untitled': api_document('untitled', None),
            'broken': RuntimeError('boom'),
        })

    def tearDown(self):
        self.temp_dir.cleanup()

    def make_orchestrator(self, dry_run=False, overwrite=True):
        config = {
            'fetch': {'mode': 'json', 'dry_run': dry_run},
            'export': {'output_directory': str(self.output_dir), 'overwrite': overwrite},
        }
        exporter = MarkdownExporter(config)
        return ExportOrchestrator(config, fetcher=self.fetcher, exporter=exporter)

    def test_exports_each_document(self):
        report = self.make_orchestrator().run(
            [ExportRequest('doc-1'), ExportRequest('doc-2', 'renamed.md')],
            show_progress=False
        )

        self.assertEqual(report['summary']['total_documents'], 2)
        self.assertEqual(report['summary']['exported'], 2)
        self.assertEqual(report['summary']['total_errors'], 0)
        self.assertEqual(
            (self.output_dir / 'First.md').read_text(encoding='utf-8'),
            '---\ntitle: First\ndocumentId: doc-1\nrevisionId: rev\n---\n\nBody\n\n'
        )
        self.assertTrue((self.output_dir / 'renamed.md').exists())
        self.assertEqual(
            [doc['status'] for doc in report['documents']],
            ['exported', 'exported']
        )
        self.assertEqual(report['documents'][1]['title'], 'Second')

    def test_failures_do_not_stop_the_batch(self):
        with self.assertLogs('gdocs_markdown', level='ERROR'):
            report = self.make_orchestrator().run(
                [
                    ExportRequest('missing'),
                    ExportRequest('untitled'),
                    ExportRequest('broken'),
                    ExportRequest('doc-1'),
                ],
                show_progress=False
            )

        statuses = {doc['document_id']: doc for doc in report['documents']}
        self.assertEqual(statuses['missing']['status'], 'failed')
        self.assertIn('not found', statuses['missing']['error_message'])
        self.assertEqual(statuses['untitled']['status'], 'failed')
        self.assertIn('Title not found', statuses['untitled']['error_message'])
        self.assertEqual(statuses['broken']['status'], 'failed')
        self.assertEqual(statuses['broken']['error_message'], 'boom')
        self.assertEqual(statuses['doc-1']['status'], 'exported')
        self.assertEqual(report['summary']['total_errors'], 3)
        self.assertEqual(report['summary']['exported'], 1)

    def test_untitled_document_with_filename_override(self):
        report = self.make_orchestrator().run([ExportRequest('untitled', 'named.md')], show_progress=False)
        self.assertEqual(report['documents'][0]['status'], 'exported')
        self.assertIn('title: \n', (self.output_dir / 'named.md').read_text(encoding='utf-8'))

    def test_dry_run_writes_nothing(self):
        report = self.make_orchestrator(dry_run=True).run([ExportRequest('doc-1')], show_progress=False)

        self.assertEqual(list(self.output_dir.iterdir()), [])
        self.assertTrue(report['summary']['dry_run'])
        self.assertEqual(report['summary']['converted'], 1)
        self.assertEqual(report['documents'][0]['status'], 'converted')
        self.assertEqual(report['documents'][0]['output_path'], str(self.output_dir / 'First.md'))

    def test_skipped_when_overwrite_disabled(self):
        (self.output_dir / 'First.md').write_text('keep\n', encoding='utf-8')
        report = self.make_orchestrator(overwrite=False).run([ExportRequest('doc-1')], show_progress=False)

        self.assertEqual(report['summary']['skipped'], 1)
        self.assertEqual(report['documents'][0]['status'], 'skipped')
        self.assertEqual((self.output_dir / 'First.md').read_text(encoding='utf-8'), 'keep\n')

    def test_report_includes_exporter_stats(self):
        report = self.make_orchestrator().run([ExportRequest('doc-1')], show_progress=False)
        self.assertEqual(report['exporter']['total_documents_exported'], 1)
        self.assertGreater(report['exporter']['total_bytes_written'], 0)


class TestReports(unittest.TestCase):
    REPORT = {
        'summary': {
            'total_documents': 2,
            'exported': 1,
            'converted': 0,
            'skipped': 0,
            'total_errors': 1,
            'dry_run': False,
            'duration_seconds': 0.5,
        },
        'exporter': {},
        'documents': [
            {'document_id': 'doc-1', 'status': 'exported', 'error_message': None},
            {'document_id': 'doc-2', 'status': 'failed', 'error_message': 'Document not found: doc-2'},
        ],
    }

    def test_console_report_lists_failures(self):
        text = format_console_report(self.REPORT)
        self.assertIn('EXPORT REPORT', text)
        self.assertNotIn('DRY RUN', text)
        self.assertIn('Exported: 1', text)
        self.assertIn('Failed: 1', text)
        self.assertIn('doc-2: Document not found: doc-2', text)
        self.assertNotIn('doc-1:', text)

    def test_console_report_marks_dry_run(self):
        report = {'summary': {'dry_run': True}, 'documents': []}
        self.assertIn('(DRY RUN)', format_console_report(report))

    def test_json_report(self):
        with TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / 'reports' / 'export.json'
            export_json_report(self.REPORT, str(path))
            self.assertEqual(json.loads(path.read_text(encoding='utf-8')), self.REPORT)


if __name__ == '__main__':
    unittest.main()
