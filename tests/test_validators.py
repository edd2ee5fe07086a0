from datetime import date

import pytest

from forecast_api.errors import InvalidDateFormat, DateRangeInverted
from forecast_api.services.validators import validate_date_range, parse_date_param, split_names

def test_open_range_when_both_missing():
    dr = validate_date_range(None, "")
    assert dr.is_open()

def test_single_bounds_are_allowed():
    assert validate_date_range("2024-09-01", None).start == date(2024, 9, 1)
    assert validate_date_range(None, "2024-09-07").end == date(2024, 9, 7)

def test_same_day_range_is_valid():
    dr = validate_date_range("2024-09-01", "2024-09-01")
    assert dr.start == dr.end == date(2024, 9, 1)

@pytest.mark.parametrize("bad", ["2023-22-29", "2024-02-30", "yesterday", "01/09/2024"])
def test_bad_start_date_names_the_field(bad):
    with pytest.raises(InvalidDateFormat) as info:
        validate_date_range(bad, "2024-09-01")
    assert info.value.field == "startDate"
    assert info.value.message == "Invalid startDate format."

def test_bad_end_date_names_the_field():
    with pytest.raises(InvalidDateFormat) as info:
        parse_date_param("2024-13-01", "endDate")
    assert "Invalid endDate format" in str(info.value)

def test_start_is_checked_before_end():
    with pytest.raises(InvalidDateFormat) as info:
        validate_date_range("nope", "also-nope")
    assert info.value.field == "startDate"

def test_inverted_range_is_rejected():
    with pytest.raises(DateRangeInverted) as info:
        validate_date_range("2024-09-07", "2024-09-01")
    assert info.value.status_code == 400
    assert "startDate cannot be after endDate" in info.value.message

def test_split_names_strips_and_dedupes():
    assert split_names(" Tokyo, Berlin,,Tokyo ,") == ["Tokyo", "Berlin"]
    assert split_names(None) == []
    assert split_names("") == []
