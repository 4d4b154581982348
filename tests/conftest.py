"""Shared fixtures for the Datawise test suite."""

import json

import pytest

from core.models import (
    BooleanField,
    DateField,
    EmailField,
    NumberField,
    StringField,
    TargetEntity,
)


@pytest.fixture
def customer_entity():
    return TargetEntity(
        id='customers',
        name='Customer Accounts',
        url='/customers',
        fields=(
            StringField(name='customer_name', required=True, max_length=20),
            EmailField(name='email', required=True),
            NumberField(name='credit_limit', min_value=0, max_value=100),
            BooleanField(name='active'),
            DateField(name='signup_date'),
        ),
    )


@pytest.fixture
def customer_rows():
    return [
        {'Customer Name': 'Acme Corp', 'E-mail': 'ops@acme.com', 'Limit': '50', 'Active': 'true', 'Signed Up': '02/29/2024'},
        {'Customer Name': ' Bolt Ltd ', 'E-mail': 'hi@bolt.io', 'Limit': '', 'Active': '0', 'Signed Up': '2024-01-15'},
    ]


@pytest.fixture
def customer_mapping():
    return {
        'customer_name': 'Customer Name',
        'email': 'E-mail',
        'credit_limit': 'Limit',
        'active': 'Active',
        'signup_date': 'Signed Up',
    }


@pytest.fixture
def config_document():
    return {
        'baseUrl': 'https://api.example.com/v1',
        'entities': [
            {
                'id': 'customers',
                'name': 'Customer Accounts',
                'url': '/customers',
                'fields': [
                    {'name': 'customer_name', 'type': 'string', 'required': True, 'maxLength': 20},
                    {'name': 'email', 'type': 'email', 'required': True},
                    {'name': 'credit_limit', 'type': 'number', 'minValue': 0, 'maxValue': 100},
                    {'name': 'active', 'type': 'boolean'},
                    {'name': 'signup_date', 'type': 'date'},
                ],
            }
        ],
    }


@pytest.fixture
def config_file(tmp_path, config_document):
    path = tmp_path / 'exportEntities.json'
    path.write_text(json.dumps(config_document), encoding='utf-8')
    return path
