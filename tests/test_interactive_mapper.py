"""Tests for the interactive mapper (prompts are patched)."""

from unittest.mock import patch

import pytest

from core.models import DateField, NumberField
from datawise.mappers import InteractiveMapper


HEADERS = ['Customer Name', 'E-mail', 'Limit', 'Active', 'Signed Up']


@pytest.fixture
def mapper(customer_rows):
    return InteractiveMapper(HEADERS, customer_rows)


class TestResolveColumn:

    @pytest.mark.parametrize('text, expected', [
        ('1', 'Customer Name'),
        ('5', 'Signed Up'),
        ('E-mail', 'E-mail'),
        ('limit', 'Limit'),
        ('  signed ', 'Signed Up'),
    ])
    def test_resolves(self, mapper, text, expected):
        assert mapper.resolve_column(text) == (expected, [])

    def test_out_of_range(self, mapper):
        assert mapper.resolve_column('9') == (None, [])

    def test_ambiguous(self, mapper):
        assert mapper.resolve_column('e') == (None, ['Customer Name', 'E-mail', 'Active', 'Signed Up'])

    def test_empty(self, mapper):
        assert mapper.resolve_column('') == (None, [])

    def test_numeric_column_name_beats_position(self):
        mapper = InteractiveMapper(['Region', '2023', '2024'], [])
        assert mapper.resolve_column('2024') == ('2024', [])
        assert mapper.resolve_column('2') == ('2023', [])


class TestMap:

    def test_accepts_complete_auto_mapping(self, mapper, customer_entity, customer_mapping):
        with patch('datawise.mappers.interactive_mapper.Confirm.ask', return_value=True):
            assert mapper.map(customer_entity, customer_mapping) == customer_mapping

    def test_manual_mode(self, mapper, customer_entity):
        answers = iter(['1', 'mail', '-', '', 'Signed Up'])
        with patch('datawise.mappers.interactive_mapper.Confirm.ask', return_value=False), \
                patch('datawise.mappers.interactive_mapper.Prompt.ask', side_effect=lambda *a, **k: next(answers)):
            mapping = mapper.map(customer_entity, {'credit_limit': 'Limit'})

        assert mapping == {
            'customer_name': 'Customer Name',
            'email': 'E-mail',
            'credit_limit': '',
            'active': '',
            'signup_date': 'Signed Up',
        }

    def test_retries_until_resolved(self, mapper, customer_entity):
        answers = iter(['nope', '42', 'Customer Name', 'E-mail', '', '', ''])
        with patch('datawise.mappers.interactive_mapper.Prompt.ask', side_effect=lambda *a, **k: next(answers)):
            # required fields unmapped, so the confirmation step is skipped
            mapping = mapper.map(customer_entity, {})

        assert mapping['customer_name'] == 'Customer Name'
        assert mapping['email'] == 'E-mail'


class TestInlinePreview:

    def test_plain_preview(self, mapper):
        assert mapper._inline_preview('Limit') == '50  [dim](1/2 filled)[/dim]'

    def test_flags_values_failing_field_checks(self, mapper):
        preview = mapper._inline_preview('E-mail', NumberField(name='credit_limit', required=True))
        assert preview.startswith('▲ ops@acme.com · hi@bolt.io')
        assert '2 invalid' in preview

    def test_valid_samples_not_flagged(self, mapper):
        preview = mapper._inline_preview('Signed Up', DateField(name='signup_date'))
        assert not preview.startswith('▲')

    def test_empty_column(self):
        assert InteractiveMapper(['a'], [{'a': ''}])._inline_preview('a') == ''
