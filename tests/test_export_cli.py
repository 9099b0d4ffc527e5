"""Tests for the gdocs-markdown command-line interface."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from gdocs_markdown.export import (
    collect_requests,
    create_argument_parser,
    load_config,
    main,
    read_ids_file
)
from gdocs_markdown.models import ExportRequest

DOCUMENT = {
    'title': 'Meeting Notes',
    'documentId': 'doc-1',
    'revisionId': 'rev-1',
    'body': {'content': [
        {'paragraph': {
            'paragraphStyle': {'namedStyleType': 'HEADING_1'},
            'elements': [{'textRun': {'content': 'Agenda\n'}}],
        }},
        {'paragraph': {'elements': [{'textRun': {'content': 'Discuss roadmap\n'}}]}},
    ]},
}


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ('GOOGLE_DOCS_CLIENT_ID', 'GOOGLE_DOCS_CLIENT_SECRET',
                 'GOOGLE_DOCS_ACCESS', 'GOOGLE_DOCS_REFRESH'):
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger('gdocs_markdown')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def json_dir(tmp_path):
    directory = tmp_path / 'exports'
    directory.mkdir()
    (directory / 'doc-1.json').write_text(json.dumps(DOCUMENT), encoding='utf-8')
    return directory


def json_args(json_dir, output_dir, *extra):
    return ['--mode', 'json', '--json-dir', str(json_dir), '-o', str(output_dir), '--no-progress', *extra]


class TestArgumentParsing:

    def test_defaults(self):
        args = create_argument_parser().parse_args(['doc-1'])
        assert args.documents == ['doc-1']
        assert args.config == 'config.yaml'
        assert args.dry_run is None
        assert args.verbose == 0

    def test_dry_run_flags(self):
        parser = create_argument_parser()
        assert parser.parse_args(['--dry-run', 'x']).dry_run is True
        assert parser.parse_args(['--no-dry-run', 'x']).dry_run is False

    def test_read_ids_file(self, tmp_path):
        ids_file = tmp_path / 'ids.txt'
        ids_file.write_text('# documents\ndoc-1\n\n  doc-2:two.md  \n', encoding='utf-8')
        assert read_ids_file(str(ids_file)) == ['doc-1', 'doc-2:two.md']

    def test_collect_requests_combines_sources(self, tmp_path):
        ids_file = tmp_path / 'ids.txt'
        ids_file.write_text('doc-2:two.md\n', encoding='utf-8')
        args = create_argument_parser().parse_args(['doc-1', '--ids-file', str(ids_file)])
        assert collect_requests(args) == [
            ExportRequest('doc-1'),
            ExportRequest('doc-2', 'two.md'),
        ]

    def test_collect_requests_requires_documents(self):
        args = create_argument_parser().parse_args([])
        with pytest.raises(ValueError):
            collect_requests(args)


class TestMain:

    def test_exports_document(self, json_dir, tmp_path, capsys):
        output_dir = tmp_path / 'out'

        assert main(json_args(json_dir, output_dir, 'doc-1')) == 0

        markdown = (output_dir / 'Meeting Notes.md').read_text(encoding='utf-8')
        assert markdown == (
            '---\ntitle: Meeting Notes\ndocumentId: doc-1\nrevisionId: rev-1\n---\n\n'
            '## Agenda\n\nDiscuss roadmap\n\n'
        )
        assert 'Exported: 1' in capsys.readouterr().out

    def test_filename_override(self, json_dir, tmp_path):
        output_dir = tmp_path / 'out'
        assert main(json_args(json_dir, output_dir, 'doc-1:notes.md')) == 0
        assert (output_dir / 'notes.md').is_file()

    def test_missing_document_returns_error_code(self, json_dir, tmp_path):
        output_dir = tmp_path / 'out'
        assert main(json_args(json_dir, output_dir, 'doc-1', 'doc-404')) == 1
        assert (output_dir / 'Meeting Notes.md').is_file()

    def test_dry_run(self, json_dir, tmp_path):
        output_dir = tmp_path / 'out'
        assert main(json_args(json_dir, output_dir, '--dry-run', 'doc-1')) == 0
        assert not output_dir.exists()

    def test_json_report(self, json_dir, tmp_path):
        report_path = tmp_path / 'report.json'
        assert main(json_args(json_dir, tmp_path / 'out', '--report', str(report_path), 'doc-1')) == 0

        report = json.loads(report_path.read_text(encoding='utf-8'))
        assert report['summary']['exported'] == 1
        assert report['documents'][0]['title'] == 'Meeting Notes'

    def test_config_file(self, json_dir, tmp_path):
        config_path = tmp_path / 'config.yaml'
        config_path.write_text(
            'fetch:\n'
            '  mode: json\n'
            'google:\n'
            f'  json_export_path: "{json_dir}"\n'
            'export:\n'
            f'  output_directory: "{tmp_path / "configured"}"\n',
            encoding='utf-8'
        )
        assert main(['--no-progress', 'doc-1']) == 0
        assert (tmp_path / 'configured' / 'Meeting Notes.md').is_file()

    def test_log_file(self, json_dir, tmp_path):
        log_path = tmp_path / 'export.log'
        args = json_args(json_dir, tmp_path / 'out', '--log-file', str(log_path), '-v', 'doc-1')
        assert main(args) == 0
        assert 'Export completed successfully' in log_path.read_text(encoding='utf-8')

    def test_no_documents(self, json_dir, tmp_path, capsys):
        assert main(json_args(json_dir, tmp_path / 'out')) == 2
        assert 'No documents given' in capsys.readouterr().err

    def test_missing_explicit_config(self, capsys):
        assert main(['--config', 'absent.yaml', 'doc-1']) == 2
        assert 'absent.yaml' in capsys.readouterr().err

    def test_api_mode_without_credentials(self, capsys):
        assert main(['--no-progress', 'doc-1']) == 2
        assert 'Configuration error' in capsys.readouterr().err


class TestEnvFile:

    def test_credentials_read_from_dotenv(self, tmp_path):
        (tmp_path / '.env').write_text(
            'GOOGLE_DOCS_ACCESS=token-from-dotenv\nGOOGLE_DOCS_REFRESH=refresh-from-dotenv\n',
            encoding='utf-8'
        )
        args = create_argument_parser().parse_args(['doc-1'])

        with patch.dict(os.environ):
            config = load_config(args)

        assert config['google']['access_token'] == 'token-from-dotenv'
        assert config['google']['refresh_token'] == 'refresh-from-dotenv'

    def test_process_environment_wins(self, tmp_path, monkeypatch):
        (tmp_path / 'custom.env').write_text('GOOGLE_DOCS_ACCESS=from-file\n', encoding='utf-8')
        monkeypatch.setenv('GOOGLE_DOCS_ACCESS', 'from-process')
        args = create_argument_parser().parse_args(['--env-file', 'custom.env', 'doc-1'])

        with patch.dict(os.environ):
            config = load_config(args)

        assert config['google']['access_token'] == 'from-process'

    def test_missing_default_env_file_is_ignored(self, json_dir):
        args = create_argument_parser().parse_args(['--mode', 'json', '--json-dir', str(json_dir), 'doc-1'])
        assert load_config(args)['fetch']['mode'] == 'json'

    def test_missing_explicit_env_file(self, capsys):
        assert main(['--env-file', 'absent.env', 'doc-1']) == 2
        assert 'absent.env' in capsys.readouterr().err
