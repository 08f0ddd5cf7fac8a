"""Integration tests for the ampdocs CLI and its configuration."""

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

import ampdocs.config as config_module
from ampdocs.config import Config, __version__
from ampdocs.main import app


EXPORT = str(Path(__file__).parent / 'fixtures' / 'export.json')

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Drop the cached Config so each test sees its own environment."""
    monkeypatch.delenv('AMPDOCS_EXPORT_PATH', raising=False)
    monkeypatch.delenv('AMPDOCS_ROOT_KIND', raising=False)
    monkeypatch.delenv('AMPDOCS_MAX_DEPTH', raising=False)
    monkeypatch.setattr(config_module, '_config', None)


class TestCommands:
    """CLI commands against the fixture export."""

    def test_summary(self):
        result = runner.invoke(app, ['summary', EXPORT])
        assert result.exit_code == 0, result.output
        assert 'Total files: 2' in result.output

    def test_show_function(self):
        result = runner.invoke(app, ['show', 'amp_admin_get_preview_permalink', EXPORT])
        assert result.exit_code == 0, result.output
        assert 'Returns a URL to preview' in result.output
        assert '$post_type' in result.output
        assert 'Deprecated' in result.output

    def test_show_class(self):
        result = runner.invoke(app, ['show', 'AMP_Options_Manager', EXPORT])
        assert result.exit_code == 0, result.output
        assert 'Options manager.' in result.output
        assert 'get_option' in result.output

    def test_show_unknown_symbol(self):
        result = runner.invoke(app, ['show', 'does_not_exist', EXPORT])
        assert result.exit_code == 1
        assert 'does_not_exist' in result.output

    def test_hooks(self):
        result = runner.invoke(app, ['hooks', EXPORT])
        assert result.exit_code == 0, result.output
        assert 'amp_query_var' in result.output
        assert 'amp_loaded' in result.output

    def test_hooks_skips_usage_references(self, tmp_path):
        export = tmp_path / 'export.json'
        export.write_text(json.dumps([{
            'path': 'a.php',
            'functions': [{
                'name': 'a',
                'uses': {'functions': [{'name': 'b', 'hooks': [{'name': 'from_usage_ref'}]}]},
            }],
        }]), encoding='utf-8')

        result = runner.invoke(app, ['hooks', str(export)])

        assert result.exit_code == 0, result.output
        assert 'from_usage_ref' not in result.output
        assert 'No hooks found' in result.output

    def test_invalid_depth_setting_reported(self, monkeypatch):
        monkeypatch.setenv('AMPDOCS_MAX_DEPTH', 'deep')
        result = runner.invoke(app, ['summary', EXPORT])
        assert result.exit_code == 1
        assert 'AMPDOCS_MAX_DEPTH' in result.output

    def test_usages(self):
        result = runner.invoke(app, ['usages', 'amp_get_slug', EXPORT])
        assert result.exit_code == 0, result.output
        assert 'Called by (2)' in result.output
        assert 'amp_admin_get_preview_permalink' in result.output
        assert 'apply_filters' in result.output

    def test_usages_unknown_symbol(self):
        result = runner.invoke(app, ['usages', 'nope', EXPORT])
        assert result.exit_code == 1

    def test_dump(self):
        result = runner.invoke(app, ['dump', 'amp_get_slug', EXPORT, '--depth', '1'])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['name'] == 'amp_get_slug'
        assert data['line'] == 30
        # Depth 1 expands the doc-block but renders its tags by label
        assert data['doc']['description'] == 'Get the slug used in AMP URLs.'
        assert data['doc']['tags'] == ['since', 'return']

    def test_missing_export(self, tmp_path):
        result = runner.invoke(app, ['summary', str(tmp_path / 'missing.json')])
        assert result.exit_code == 1
        assert 'does not exist' in result.output

    def test_malformed_export(self, tmp_path):
        export = tmp_path / 'export.json'
        export.write_text('"just a string"', encoding='utf-8')
        result = runner.invoke(app, ['summary', str(export)])
        assert result.exit_code == 1

    def test_malformed_sub_record_reported(self, tmp_path):
        export = tmp_path / 'export.json'
        export.write_text(json.dumps([{'path': 'a.php', 'functions': [{'line': 3}]}]), encoding='utf-8')
        result = runner.invoke(app, ['summary', str(export)])
        assert result.exit_code == 1
        assert 'functions[0]' in result.output

    def test_default_export_from_environment(self, monkeypatch):
        monkeypatch.setenv('AMPDOCS_EXPORT_PATH', EXPORT)
        result = runner.invoke(app, ['summary'])
        assert result.exit_code == 0, result.output

    def test_version(self):
        result = runner.invoke(app, ['version'])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestConfig:
    """Environment-backed configuration."""

    def test_defaults(self, tmp_path):
        config = Config(env_path=tmp_path / '.env')
        assert config.export_path == Path('docs/export.json')
        assert config.root_kind == 'file'
        assert config.max_depth == 4

    def test_env_file(self, tmp_path):
        env_file = tmp_path / '.env'
        env_file.write_text('AMPDOCS_MAX_DEPTH=2\nAMPDOCS_ROOT_KIND=function\n', encoding='utf-8')
        try:
            config = Config(env_path=env_file)
            assert config.max_depth == 2
            assert config.root_kind == 'function'
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop('AMPDOCS_MAX_DEPTH', None)
            os.environ.pop('AMPDOCS_ROOT_KIND', None)

    def test_invalid_depth(self, tmp_path, monkeypatch):
        monkeypatch.setenv('AMPDOCS_MAX_DEPTH', 'deep')
        with pytest.raises(ValueError):
            Config(env_path=tmp_path / '.env')

    def test_negative_depth(self, tmp_path, monkeypatch):
        monkeypatch.setenv('AMPDOCS_MAX_DEPTH', '-1')
        with pytest.raises(ValueError):
            Config(env_path=tmp_path / '.env')
