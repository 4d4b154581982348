"""Datawise Core"""

from ._version import __version__
from .config import DatawiseConfig, get_config, reload_config
from .entity_config import (
    ConfigError,
    load_export_config,
    save_export_config,
    parse_export_config,
    export_config_to_dict,
    find_config_warnings,
)
from .models import (
    FieldType,
    StringField,
    EmailField,
    NumberField,
    BooleanField,
    DateField,
    LookupReference,
    TargetEntity,
    ExportConfig,
    FieldMapping,
    ValidationError,
    ValidationReport,
    MappingSuggestion,
)

__all__ = [
    '__version__',
    'DatawiseConfig', 'get_config', 'reload_config',
    'ConfigError', 'load_export_config', 'save_export_config',
    'parse_export_config', 'export_config_to_dict', 'find_config_warnings',
    'FieldType', 'StringField', 'EmailField', 'NumberField', 'BooleanField',
    'DateField', 'LookupReference', 'TargetEntity', 'ExportConfig',
    'FieldMapping', 'ValidationError', 'ValidationReport', 'MappingSuggestion',
]
