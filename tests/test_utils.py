import math

import pytest

from relquant.utils import format_p_value, generate_id, is_missing, natural_sort_key, parse_efficiency


class TestNaturalSortKey:
    def test_natural_sort_key_basic_numbers(self):
        samples = ['Sample10', 'Sample2', 'Sample1', 'Sample20']
        sorted_samples = sorted(samples, key=natural_sort_key)

        assert sorted_samples == ['Sample1', 'Sample2', 'Sample10', 'Sample20']

    def test_natural_sort_key_mixed_content(self):
        samples = ['A10B2', 'A2B1', 'A1B10']
        sorted_samples = sorted(samples, key=natural_sort_key)

        assert sorted_samples == ['A1B10', 'A2B1', 'A10B2']

    def test_natural_sort_key_case_insensitive(self):
        samples = ['sample1', 'SAMPLE2', 'Sample3']
        sorted_samples = sorted(samples, key=natural_sort_key)

        assert sorted_samples == ['sample1', 'SAMPLE2', 'Sample3']

    def test_natural_sort_key_none_handling(self):
        result = natural_sort_key(None)
        assert isinstance(result, list)


class TestFormatPValue:
    def test_missing(self):
        assert format_p_value(None) == "-"
        assert format_p_value(math.nan) == "-"

    def test_decimal(self):
        assert format_p_value(0.0623) == "0.0623"
        assert format_p_value(0.001) == "0.0010"

    def test_exponent_below_one_thousandth(self):
        assert format_p_value(0.000123) == "1.23e-04"


class TestParseEfficiency:
    @pytest.mark.parametrize("text, expected", [("1.95", 1.95), (" 2 ", 2.0), ("1", 1.0), ("3", 3.0)])
    def test_valid(self, text, expected):
        assert parse_efficiency(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "0.9", "3.1", "nan"])
    def test_invalid(self, text):
        assert parse_efficiency(text) is None


class TestHelpers:
    def test_is_missing(self):
        assert is_missing(None)
        assert is_missing(float("nan"))
        assert not is_missing(0.0)

    def test_generate_id(self):
        ids = {generate_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 7 for i in ids)
