"""
Datawise Configuration
Centralized configuration management
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from ._version import __version__


DEFAULT_MAX_VALIDATION_ERRORS = 200


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, '')
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


def _env_path(name: str, default: Path, root_dir: Path) -> Path:
    raw = os.getenv(name, '')
    if not raw:
        return default
    path = Path(raw).expanduser()
    return path if path.is_absolute() else root_dir / path


class DatawiseConfig:
    """
    Centralized configuration for Datawise.
    Loads from .env and provides typed access to all settings.
    """

    def __init__(self, env_file: Optional[Path] = None):
        if env_file is None:
            env_file = Path(__file__).parent.parent / '.env'

        if env_file.exists():
            load_dotenv(env_file)

        # Framework settings
        self.framework_name = "Datawise"
        self.framework_version = __version__

        # Paths
        self.root_dir = Path(__file__).parent.parent
        self.output_dir = _env_path('OUTPUT_DIR', self.root_dir / 'output', self.root_dir)
        self.entity_config_path = _env_path(
            'ENTITY_CONFIG_PATH', self.root_dir / 'exportEntities.json', self.root_dir
        )
        self.lookup_cache_file = _env_path(
            'LOOKUP_CACHE_FILE', Path.home() / '.datawise' / 'lookup_cache.json', self.root_dir
        )

        # Export target
        self.auth_token = os.getenv('DATAWISE_AUTH_TOKEN', '')
        self.export_timeout = _env_int('EXPORT_TIMEOUT', 30)

        # Validation
        self.max_validation_errors = _env_int('MAX_VALIDATION_ERRORS', DEFAULT_MAX_VALIDATION_ERRORS)

        # API Keys - AI Providers (for mapping suggestions)
        self.ai_provider = os.getenv('AI_PROVIDER', 'openai')
        self.openai_api_key = os.getenv('OPENAI_API_KEY', '')
        self.openai_model = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
        self.anthropic_api_key = os.getenv('ANTHROPIC_API_KEY', '')
        self.anthropic_model = os.getenv('ANTHROPIC_MODEL', 'claude-3-haiku-20240307')

        self.log_level = os.getenv('LOG_LEVEL', 'WARNING').upper()

    @property
    def has_auth_token(self) -> bool:
        return bool(self.auth_token)

    @property
    def has_ai_provider(self) -> bool:
        if self.ai_provider == 'openai':
            return bool(self.openai_api_key)
        elif self.ai_provider == 'anthropic':
            return bool(self.anthropic_api_key)
        return False

    @property
    def ai_api_key(self) -> str:
        if self.ai_provider == 'openai':
            return self.openai_api_key
        elif self.ai_provider == 'anthropic':
            return self.anthropic_api_key
        return ''

    @property
    def ai_model(self) -> Optional[str]:
        if self.ai_provider == 'openai':
            return self.openai_model
        elif self.ai_provider == 'anthropic':
            return self.anthropic_model
        return None

    def get_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def get_config_status(self) -> Dict[str, Any]:
        return {
            'framework': {
                'name': self.framework_name,
                'version': self.framework_version
            },
            'export': {
                'entity_config': str(self.entity_config_path),
                'entity_config_exists': self.entity_config_path.exists(),
                'auth_token': self.has_auth_token,
                'output_dir': str(self.output_dir),
            },
            'ai': {
                'provider': self.ai_provider,
                'configured': self.has_ai_provider,
                'model': self.ai_model,
            },
            'validation': {
                'max_errors': self.max_validation_errors,
            },
        }

    def __repr__(self) -> str:
        status = self.get_config_status()
        return f"DatawiseConfig({status['export']}, ai={status['ai']['configured']})"


# Global config instance
_config: Optional[DatawiseConfig] = None


def get_config() -> DatawiseConfig:
    global _config
    if _config is None:
        _config = DatawiseConfig()
    return _config


def reload_config(env_file: Optional[Path] = None) -> DatawiseConfig:
    global _config
    _config = DatawiseConfig(env_file)
    return _config
