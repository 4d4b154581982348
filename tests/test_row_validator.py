"""
Row Validator Tests

Covers the per-field checks: required/mapped handling, text length and
pattern constraints, email shape, number parsing and bounds, booleans,
dates, and lookup references.
"""

import pytest

from core.models import (
    BooleanField,
    DateField,
    EmailField,
    LookupReference,
    NumberField,
    StringField,
)
from datawise.lookups import LookupTable
from datawise.validators import validate_row


def _validate(target_field, value, mapped=True):
    row = {'col': value}
    mapping = {target_field.name: 'col' if mapped else ''}
    return validate_row(row, 0, [target_field], mapping)


class TestRequiredAndMapping:
    """Required/unmapped handling."""

    def test_valid_rows_produce_no_errors(self, customer_entity, customer_rows, customer_mapping):
        for index, row in enumerate(customer_rows):
            assert validate_row(row, index, customer_entity.fields, customer_mapping) == []

    def test_required_unmapped_reports_once_and_skips_checks(self):
        errors = _validate(EmailField(name='email', required=True), 'not-an-email', mapped=False)
        assert len(errors) == 1
        assert 'not mapped' in errors[0].message
        assert errors[0].source_column is None

    def test_optional_unmapped_is_ignored(self):
        assert _validate(NumberField(name='qty'), 'abc', mapped=False) == []

    def test_none_mapping_counts_as_unmapped(self):
        target = StringField(name='code', required=True)
        errors = validate_row({'col': 'x'}, 0, [target], {'code': None})
        assert len(errors) == 1

    def test_missing_mapping_key_counts_as_unmapped(self):
        target = StringField(name='code', required=True)
        errors = validate_row({'col': 'x'}, 0, [target], {})
        assert len(errors) == 1

    @pytest.mark.parametrize('value', ['', '   ', None])
    def test_required_empty_reports_exactly_one_error(self, value):
        errors = _validate(NumberField(name='qty', required=True, min_value=1), value)
        assert len(errors) == 1
        assert 'source data is empty' in errors[0].message

    def test_optional_empty_is_valid(self):
        assert _validate(DateField(name='when'), '') == []

    def test_missing_source_key_treated_as_empty(self):
        target = StringField(name='code', required=True)
        errors = validate_row({}, 0, [target], {'code': 'col'})
        assert len(errors) == 1
        assert 'source data is empty' in errors[0].message


class TestTextChecks:
    """String/email length, pattern and email shape."""

    def test_min_length(self):
        errors = _validate(StringField(name='code', min_length=3), 'ab')
        assert len(errors) == 1
        assert 'min length 3' in errors[0].message

    def test_max_length(self):
        errors = _validate(StringField(name='code', max_length=3), 'abcd')
        assert len(errors) == 1
        assert 'max length 3' in errors[0].message

    def test_length_measured_after_trim(self):
        assert _validate(StringField(name='code', max_length=3), '  abc  ') == []

    def test_pattern_mismatch(self):
        errors = _validate(StringField(name='code', pattern=r'^[A-Z]{3}$'), 'abc')
        assert len(errors) == 1
        assert 'does not match pattern' in errors[0].message

    def test_pattern_is_unanchored_search(self):
        assert _validate(StringField(name='code', pattern=r'\d'), 'abc1') == []

    def test_invalid_pattern_is_ignored(self):
        assert _validate(StringField(name='code', pattern='[unclosed'), 'anything') == []

    @pytest.mark.parametrize('value', ['a@b.com', 'first.last@sub.example.org'])
    def test_valid_email(self, value):
        assert _validate(EmailField(name='email'), value) == []

    @pytest.mark.parametrize('value', ['a@b', 'a b@c.com', 'ab.com', 'a@@b.com'])
    def test_invalid_email(self, value):
        errors = _validate(EmailField(name='email'), value)
        assert len(errors) == 1
        assert 'not a valid email' in errors[0].message

    def test_email_collects_every_failed_constraint(self):
        target = EmailField(name='email', max_length=2, pattern=r'^x')
        errors = _validate(target, 'a@b')
        assert len(errors) == 3

    def test_long_values_truncated_in_message(self):
        errors = _validate(StringField(name='code', max_length=5), 'x' * 80)
        assert 'x' * 50 in errors[0].message
        assert 'x' * 51 not in errors[0].message


class TestNumberChecks:
    """Number parsing and bounds."""

    def test_above_max_reports_one_error(self):
        errors = _validate(NumberField(name='pct', min_value=0, max_value=100), '150')
        assert len(errors) == 1
        assert 'max value 100' in errors[0].message

    def test_below_min_reports_one_error(self):
        errors = _validate(NumberField(name='pct', min_value=0, max_value=100), '-1')
        assert len(errors) == 1
        assert 'min value 0' in errors[0].message

    def test_not_a_number_skips_bounds(self):
        errors = _validate(NumberField(name='pct', min_value=0, max_value=100), 'abc')
        assert len(errors) == 1
        assert 'should be a number' in errors[0].message

    @pytest.mark.parametrize('value', ['42', '3.5', '-0.25', '1e3', '12kg'])
    def test_leading_number_accepted(self, value):
        assert _validate(NumberField(name='qty'), value) == []

    def test_bounds_inclusive(self):
        target = NumberField(name='pct', min_value=0, max_value=100)
        assert _validate(target, '0') == []
        assert _validate(target, '100') == []


class TestBooleanChecks:

    @pytest.mark.parametrize('value', ['true', 'FALSE', '1', '0', 'True'])
    def test_accepted(self, value):
        assert _validate(BooleanField(name='flag'), value) == []

    @pytest.mark.parametrize('value', ['yes', 'no', '2', 'y'])
    def test_rejected(self, value):
        errors = _validate(BooleanField(name='flag'), value)
        assert len(errors) == 1
        assert 'should be boolean' in errors[0].message

    def test_native_bool_value(self):
        assert validate_row({'col': True}, 0, [BooleanField(name='flag')], {'flag': 'col'}) == []


class TestDateChecks:

    @pytest.mark.parametrize('value', [
        '2024-02-29',
        '02/29/2024',
        '2/9/2024',
        '12-31-2023',
        '2024-03-01T09:30:00Z',
        '2024-03-01T09:30:00+02:00',
        '2024-03-01T09:30:00.5Z',
        '20240301T093000',
    ])
    def test_valid_dates(self, value):
        assert _validate(DateField(name='when'), value) == []

    @pytest.mark.parametrize('value', [
        '2024-02-30',
        '2023-02-29',
        '2024-13-01',
        '13/01/2024',
        '02/30/2024',
        '2024/01/01',
        'tomorrow',
        '2024-02-30T10:00:00',
    ])
    def test_invalid_dates(self, value):
        errors = _validate(DateField(name='when'), value)
        assert len(errors) == 1
        assert 'not a valid date' in errors[0].message


class TestErrorShape:

    def test_row_number_is_one_based(self):
        target = NumberField(name='qty')
        errors = validate_row({'Qty': 'x'}, 4, [target], {'qty': 'Qty'})
        assert errors[0].row_index == 4
        assert errors[0].row_number == 5
        assert errors[0].message.startswith('Row 5')
        assert errors[0].target_field == 'qty'
        assert errors[0].source_column == 'Qty'
        assert str(errors[0]) == errors[0].message

    def test_errors_follow_field_order(self, customer_entity, customer_mapping):
        row = {'Customer Name': '', 'E-mail': 'bad', 'Limit': 'x', 'Active': 'maybe', 'Signed Up': 'never'}
        errors = validate_row(row, 0, customer_entity.fields, customer_mapping)
        assert [e.target_field for e in errors] == [
            'customer_name', 'email', 'credit_limit', 'active', 'signup_date',
        ]

    def test_same_input_same_errors(self, customer_entity, customer_mapping):
        row = {'Customer Name': 'x' * 30, 'E-mail': 'a b@c.com'}
        first = validate_row(row, 0, customer_entity.fields, customer_mapping)
        second = validate_row(row, 0, customer_entity.fields, customer_mapping)
        assert first == second


class TestLookupChecks:
    """Lookup references are only checked when lookup tables are supplied."""

    @pytest.fixture
    def owner_field(self):
        return StringField(
            name='owner',
            lookup_validation=LookupReference(lookup_id='owners', lookup_field='Owner'),
        )

    @pytest.fixture
    def owners(self):
        return {'owners': LookupTable('owners', rows=[{'Owner': 'TRAC'}, {'Owner': 'DCLI'}])}

    def test_not_checked_without_lookups(self, owner_field):
        assert validate_row({'o': 'NOPE'}, 0, [owner_field], {'owner': 'o'}) == []

    def test_value_present(self, owner_field, owners):
        assert validate_row({'o': ' TRAC '}, 0, [owner_field], {'owner': 'o'}, lookups=owners) == []

    def test_value_missing(self, owner_field, owners):
        errors = validate_row({'o': 'NOPE'}, 0, [owner_field], {'owner': 'o'}, lookups=owners)
        assert len(errors) == 1
        assert 'not found in "owners"' in errors[0].message

    def test_lookup_not_loaded(self, owner_field):
        errors = validate_row({'o': 'TRAC'}, 0, [owner_field], {'owner': 'o'}, lookups={})
        assert len(errors) == 1
        assert 'not loaded' in errors[0].message

    def test_lookup_column_missing(self, owner_field):
        lookups = {'owners': LookupTable('owners', rows=[{'Name': 'TRAC'}])}
        errors = validate_row({'o': 'TRAC'}, 0, [owner_field], {'owner': 'o'}, lookups=lookups)
        assert len(errors) == 1
        assert 'lookup column "Owner" not found' in errors[0].message

    def test_empty_value_not_looked_up(self, owner_field):
        assert validate_row({'o': ''}, 0, [owner_field], {'owner': 'o'}, lookups={}) == []
