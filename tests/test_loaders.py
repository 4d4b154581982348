"""Tests for CSV/Excel loading and header detection."""

import pandas as pd
import pytest

from datawise.loaders import CSVLoader, ExcelLoader, get_loader
from datawise.loaders.csv_loader import find_header_row, rows_to_records


def _write(path, text, encoding='utf-8'):
    path.write_text(text, encoding=encoding)
    return path


class TestFindHeaderRow:

    def test_first_row(self):
        rows = [['name', 'email'], ['Acme', 'a@b.com']]
        assert find_header_row(rows) == (0, ['name', 'email'])

    def test_skips_title_and_blank_rows(self):
        rows = [['Customer Export'], [], ['name', 'email', 'limit'], ['Acme', 'a@b.com', '5']]
        assert find_header_row(rows) == (2, ['name', 'email', 'limit'])

    def test_numeric_row_is_not_a_header(self):
        rows = [['1', '2', '3'], ['id', 'qty', 'price'], ['7', '8', '9']]
        assert find_header_row(rows) == (1, ['id', 'qty', 'price'])

    def test_all_blank(self):
        assert find_header_row([[], ['', ' ']]) == (2, [])


class TestRowsToRecords:

    def test_trims_pads_and_skips(self):
        headers = ['a', 'b', 'c']
        rows = [[' 1 ', '2'], [], ['', '', ''], ['Total', '', ''], ['x', 'y', 'z']]
        assert rows_to_records(headers, rows) == [
            {'a': '1', 'b': '2', 'c': ''},
            {'a': 'x', 'b': 'y', 'c': 'z'},
        ]


class TestCSVLoader:

    def test_load_simple(self, tmp_path):
        path = _write(tmp_path / 'data.csv', 'Customer Name,E-mail\nAcme, ops@acme.com \nBolt,hi@bolt.io\n')
        records, headers = CSVLoader(str(path)).load()
        assert headers == ['Customer Name', 'E-mail']
        assert records == [
            {'Customer Name': 'Acme', 'E-mail': 'ops@acme.com'},
            {'Customer Name': 'Bolt', 'E-mail': 'hi@bolt.io'},
        ]

    def test_title_rows_above_header(self, tmp_path):
        text = 'Customer Export\n\nname,email,limit\nAcme,a@b.com,5\nBolt,b@c.io,7\nTotal,,\n'
        records, headers = CSVLoader(str(_write(tmp_path / 'report.csv', text))).load()
        assert headers == ['name', 'email', 'limit']
        assert [r['name'] for r in records] == ['Acme', 'Bolt']

    def test_semicolon_delimiter(self, tmp_path):
        text = 'name;qty\nA;1\nB;2\nC;3\n'
        records, headers = CSVLoader(str(_write(tmp_path / 'semi.csv', text))).load()
        assert headers == ['name', 'qty']
        assert records[2] == {'name': 'C', 'qty': '3'}

    def test_quoted_commas(self, tmp_path):
        text = 'name,city\n"Acme, Inc",Oslo\n"Bolt",Rome\n'
        records, _ = CSVLoader(str(_write(tmp_path / 'q.csv', text))).load()
        assert records[0]['name'] == 'Acme, Inc'

    def test_bom_stripped(self, tmp_path):
        path = _write(tmp_path / 'bom.csv', 'name,email\nAcme,a@b.com\n', encoding='utf-8-sig')
        _, headers = CSVLoader(str(path)).load()
        assert headers == ['name', 'email']

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / 'latin.csv'
        path.write_bytes('name,city\nZo\xeb,K\xf6ln\n'.encode('latin1'))
        records, _ = CSVLoader(str(path)).load()
        assert records == [{'name': 'Zoë', 'city': 'Köln'}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CSVLoader(str(tmp_path / 'nope.csv'))

    def test_empty_file(self, tmp_path):
        with pytest.raises(ValueError):
            CSVLoader(str(_write(tmp_path / 'empty.csv', '\n\n'))).load()

    def test_get_info(self, tmp_path):
        path = _write(tmp_path / 'data.csv', 'a,b\n1,2\n3,4\n')
        info = CSVLoader(str(path)).get_info()
        assert info['row_count'] == 2
        assert info['column_count'] == 2
        assert info['headers'] == ['a', 'b']


class TestExcelLoader:

    @pytest.fixture
    def workbook(self, tmp_path):
        path = tmp_path / 'orders.xlsx'
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({'ID': ['007', '008'], 'Qty': [5, None], 'Note': [' hi ', 'x']}).to_excel(
                writer, sheet_name='March', index=False)
            pd.DataFrame({'Other': ['a']}).to_excel(writer, sheet_name='April', index=False)
        return path

    def test_sheet_names(self, workbook):
        assert ExcelLoader(str(workbook)).sheet_names() == ['March', 'April']

    def test_load_first_sheet_as_text(self, workbook):
        records, headers = ExcelLoader(str(workbook)).load()
        assert headers == ['ID', 'Qty', 'Note']
        assert records[0] == {'ID': '007', 'Qty': '5', 'Note': 'hi'}
        assert records[1]['Qty'] == ''

    def test_load_named_sheet(self, workbook):
        records, headers = ExcelLoader(str(workbook), sheet='April').load()
        assert headers == ['Other']
        assert records == [{'Other': 'a'}]

    def test_unknown_sheet(self, workbook):
        with pytest.raises(ValueError):
            ExcelLoader(str(workbook), sheet='May').load()


class TestGetLoader:

    def test_csv(self, tmp_path):
        path = _write(tmp_path / 'data.tsv', 'a\tb\n1\t2\n')
        assert isinstance(get_loader(str(path)), CSVLoader)

    def test_excel(self, tmp_path):
        path = tmp_path / 'book.xlsx'
        pd.DataFrame({'a': [1]}).to_excel(path, index=False)
        assert isinstance(get_loader(str(path)), ExcelLoader)

    def test_unsupported(self, tmp_path):
        with pytest.raises(ValueError):
            get_loader(str(tmp_path / 'doc.pdf'))
