"""
Entity configuration store

Reads and writes the export entity document:

    {"baseUrl": "...", "entities": [{"id", "name", "url", "fields": [...]}]}

A missing or unreadable document is treated as an empty configuration.
Saving always replaces the whole document.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import (
    ExportConfig,
    FIELD_CLASSES,
    FieldType,
    LookupReference,
    NumberField,
    TargetEntity,
    TargetField,
    TextField,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when an entity configuration document is malformed."""


# JSON key -> dataclass attribute, per constraint family
TEXT_CONSTRAINTS = {'minLength': 'min_length', 'maxLength': 'max_length', 'pattern': 'pattern'}
NUMBER_CONSTRAINTS = {'minValue': 'min_value', 'maxValue': 'max_value'}


def _parse_field_type(raw: Any, entity_id: str, field_name: str) -> FieldType:
    if raw is None or raw == '':
        return FieldType.STRING
    try:
        return FieldType(str(raw).lower())
    except ValueError:
        logger.warning(
            "Entity %r field %r has unknown type %r, treating as string",
            entity_id, field_name, raw,
        )
        return FieldType.STRING


def _parse_number(value: Any, key: str, where: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: '{key}' must be a number, got {value!r}")
    return value


def parse_field(data: Dict[str, Any], entity_id: str = '') -> TargetField:
    """Build a typed field definition from its JSON form."""
    if not isinstance(data, dict):
        raise ConfigError(f"Entity {entity_id!r}: field definition must be an object")

    name = data.get('name')
    if not name or not isinstance(name, str):
        raise ConfigError(f"Entity {entity_id!r}: every field needs a non-empty 'name'")

    where = f"Entity {entity_id!r} field {name!r}"
    field_type = _parse_field_type(data.get('type'), entity_id, name)
    field_cls = FIELD_CLASSES[field_type]

    required = data.get('required', False)
    if not isinstance(required, bool):
        raise ConfigError(f"{where}: 'required' must be true or false, got {required!r}")

    kwargs: Dict[str, Any] = {
        'name': name,
        'required': required,
    }

    lookup = data.get('lookupValidation')
    if lookup:
        if not isinstance(lookup, dict) or not lookup.get('lookupId') or not lookup.get('lookupField'):
            raise ConfigError(f"{where}: 'lookupValidation' needs 'lookupId' and 'lookupField'")
        kwargs['lookup_validation'] = LookupReference(
            lookup_id=str(lookup['lookupId']),
            lookup_field=str(lookup['lookupField']),
        )

    if field_cls in TextField:
        for key, attr in TEXT_CONSTRAINTS.items():
            if data.get(key) is None:
                continue
            if key == 'pattern':
                kwargs[attr] = str(data[key])
            else:
                number = _parse_number(data[key], key, where)
                kwargs[attr] = int(number)
        applicable = TEXT_CONSTRAINTS
    elif field_cls is NumberField:
        for key, attr in NUMBER_CONSTRAINTS.items():
            kwargs[attr] = _parse_number(data.get(key), key, where)
        applicable = NUMBER_CONSTRAINTS
    else:
        applicable = {}

    ignored = [
        key for key in list(TEXT_CONSTRAINTS) + list(NUMBER_CONSTRAINTS)
        if key not in applicable and data.get(key) is not None
    ]
    if ignored:
        logger.debug("%s: ignoring constraints %s for type %s", where, ignored, field_type.value)

    return field_cls(**kwargs)


def parse_entity(data: Dict[str, Any]) -> TargetEntity:
    if not isinstance(data, dict):
        raise ConfigError("Entity definition must be an object")

    entity_id = data.get('id')
    if not entity_id or not isinstance(entity_id, str):
        raise ConfigError("Every entity needs a non-empty string 'id'")

    raw_fields = data.get('fields') or []
    if not isinstance(raw_fields, list):
        raise ConfigError(f"Entity {entity_id!r}: 'fields' must be a list")

    fields = []
    seen = set()
    for raw_field in raw_fields:
        target_field = parse_field(raw_field, entity_id)
        if target_field.name in seen:
            raise ConfigError(f"Entity {entity_id!r}: duplicate field name {target_field.name!r}")
        seen.add(target_field.name)
        fields.append(target_field)

    return TargetEntity(
        id=entity_id,
        name=str(data.get('name') or entity_id),
        url=str(data.get('url') or ''),
        fields=tuple(fields),
    )


def parse_export_config(data: Any) -> ExportConfig:
    """
    Build an ExportConfig from the decoded JSON document.

    Raises:
        ConfigError: If the document shape is invalid
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    base_url = data.get('baseUrl', '')
    if base_url is None:
        base_url = ''
    if not isinstance(base_url, str):
        raise ConfigError("'baseUrl' must be a string")

    raw_entities = data.get('entities')
    if not isinstance(raw_entities, list):
        raise ConfigError("'entities' must be a list")

    entities = []
    seen = set()
    for raw_entity in raw_entities:
        entity = parse_entity(raw_entity)
        if entity.id in seen:
            raise ConfigError(f"Duplicate entity id {entity.id!r}")
        seen.add(entity.id)
        entities.append(entity)

    return ExportConfig(base_url=base_url, entities=tuple(entities))


def field_to_dict(target_field: TargetField) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        'name': target_field.name,
        'type': target_field.field_type.value,
        'required': target_field.required,
    }
    for attrs in (TEXT_CONSTRAINTS, NUMBER_CONSTRAINTS):
        for key, attr in attrs.items():
            value = getattr(target_field, attr, None)
            if value is not None:
                data[key] = value
    if target_field.lookup_validation:
        data['lookupValidation'] = {
            'lookupId': target_field.lookup_validation.lookup_id,
            'lookupField': target_field.lookup_validation.lookup_field,
        }
    return data


def export_config_to_dict(config: ExportConfig) -> Dict[str, Any]:
    return {
        'baseUrl': config.base_url,
        'entities': [
            {
                'id': entity.id,
                'name': entity.name,
                'url': entity.url,
                'fields': [field_to_dict(f) for f in entity.fields],
            }
            for entity in config.entities
        ],
    }


def load_export_config(path: Union[str, Path]) -> ExportConfig:
    """
    Load the entity configuration from disk.

    Missing files and unreadable documents yield an empty configuration.
    """
    path = Path(path)
    if not path.exists():
        logger.info("Entity config %s not found, using empty configuration", path)
        return ExportConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return parse_export_config(data)
    except (OSError, ValueError) as e:
        logger.warning("Could not load entity config %s: %s", path, e)
        return ExportConfig()


def save_export_config(config: Union[ExportConfig, Dict[str, Any]], path: Union[str, Path]) -> None:
    """
    Replace the entity configuration document on disk.

    Raw dicts are parsed first so a malformed document is never written.

    Raises:
        ConfigError: If a raw dict is not a valid configuration
    """
    if not isinstance(config, ExportConfig):
        config = parse_export_config(config)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(export_config_to_dict(config), f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def find_config_warnings(config: ExportConfig) -> List[str]:
    """
    List non-fatal problems in a configuration.

    Invalid patterns are reported here but still saved; validation treats
    them as no constraint.
    """
    warnings = []
    for entity in config.entities:
        for target_field in entity.fields:
            where = f"{entity.id}.{target_field.name}"
            pattern = getattr(target_field, 'pattern', None)
            if pattern:
                try:
                    re.compile(pattern)
                except re.error as e:
                    warnings.append(f"{where}: pattern {pattern!r} is not a valid regex ({e}); it will be ignored")

            min_length = getattr(target_field, 'min_length', None)
            max_length = getattr(target_field, 'max_length', None)
            if min_length is not None and max_length is not None and min_length > max_length:
                warnings.append(f"{where}: minLength {min_length} is greater than maxLength {max_length}")

            min_value = getattr(target_field, 'min_value', None)
            max_value = getattr(target_field, 'max_value', None)
            if min_value is not None and max_value is not None and min_value > max_value:
                warnings.append(f"{where}: minValue {min_value} is greater than maxValue {max_value}")

        if not entity.url:
            warnings.append(f"{entity.id}: no url configured")
    return warnings
