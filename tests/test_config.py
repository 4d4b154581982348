"""Tests for environment configuration and logging setup."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from core.config import DEFAULT_MAX_VALIDATION_ERRORS, DatawiseConfig
from core.log import setup_logging


class TestDatawiseConfig:

    def test_defaults(self, monkeypatch, tmp_path):
        for name in ('MAX_VALIDATION_ERRORS', 'EXPORT_TIMEOUT', 'AI_PROVIDER', 'OPENAI_API_KEY', 'LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)
        config = DatawiseConfig(tmp_path / 'missing.env')

        assert config.max_validation_errors == DEFAULT_MAX_VALIDATION_ERRORS == 200
        assert config.export_timeout == 30
        assert config.ai_provider == 'openai'
        assert not config.has_ai_provider
        assert config.log_level == 'WARNING'

    def test_env_file(self, monkeypatch, tmp_path):
        # load_dotenv writes to os.environ; register the keys so they are restored
        for name in ('MAX_VALIDATION_ERRORS', 'AI_PROVIDER', 'ANTHROPIC_API_KEY', 'ANTHROPIC_MODEL'):
            monkeypatch.setenv(name, 'unset')
            monkeypatch.delenv(name)
        env_file = tmp_path / '.env'
        env_file.write_text(
            'MAX_VALIDATION_ERRORS=50\nAI_PROVIDER=anthropic\nANTHROPIC_API_KEY=key\nANTHROPIC_MODEL=claude-test\n',
            encoding='utf-8',
        )
        config = DatawiseConfig(env_file)

        assert config.max_validation_errors == 50
        assert config.has_ai_provider
        assert config.ai_api_key == 'key'
        assert config.ai_model == 'claude-test'

    def test_bad_int_falls_back(self, monkeypatch, tmp_path):
        monkeypatch.setenv('EXPORT_TIMEOUT', 'soon')
        assert DatawiseConfig(tmp_path / 'missing.env').export_timeout == 30

    def test_relative_paths_resolve_from_project_root(self, monkeypatch, tmp_path):
        monkeypatch.setenv('ENTITY_CONFIG_PATH', 'conf/entities.json')
        config = DatawiseConfig(tmp_path / 'missing.env')
        assert config.entity_config_path == config.root_dir / 'conf' / 'entities.json'

    def test_status(self, monkeypatch, tmp_path):
        monkeypatch.setenv('OUTPUT_DIR', str(tmp_path / 'out'))
        config = DatawiseConfig(tmp_path / 'missing.env')
        status = config.get_config_status()
        assert status['framework']['name'] == 'Datawise'
        assert status['export']['output_dir'] == str(tmp_path / 'out')
        assert config.get_output_dir() == Path(tmp_path / 'out')
        assert (tmp_path / 'out').is_dir()


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = root.level
    try:
        setup_logging('debug')
        setup_logging('INFO')
        assert sum(isinstance(h, RichHandler) for h in root.handlers) == 1
        assert root.level == logging.INFO
    finally:
        for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
            root.removeHandler(handler)
        root.setLevel(before)
