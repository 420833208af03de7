from __future__ import annotations

import logging

import pytest

from quick_roster.models.raw_table import RawRow
from quick_roster.models.records import Location, Operative
from quick_roster.normalizers import OperativeRowParser, ValidationError
from quick_roster.normalizers.timeparse import format_days_available

MAPPING = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "location": "Location",
    "operative_type": "Type",
    "default_start_time": "Start",
    "default_end_time": "End",
    "default_days_available": "Days",
}


def _row(**overrides) -> RawRow:
    cells = {
        "First Name": "Ann",
        "Last Name": "Smith",
        "Email": "ann@example.com",
        "Phone": "+44 (0)113 496-0000",
        "Location": "Leeds",
        "Type": "Cleaner",
        "Start": "9",
        "End": "17:00:00",
        "Days": "1111100",
    }
    cells.update(overrides)
    return RawRow(cells)


def test_parse_full_row():
    op = OperativeRowParser(MAPPING).parse_row(_row())
    assert op == Operative(
        first_name="Ann",
        last_name="Smith",
        email="ann@example.com",
        phone="+44 (0)113 496-0000",
        location="Leeds",
        operative_type="Cleaner",
        default_start_time="09:00",
        default_end_time="17:00",
        default_days_available="1111100",
    )
    assert op.full_name == "Ann Smith"


def test_days_mask_validation():
    parser = OperativeRowParser(MAPPING)
    with pytest.raises(ValidationError) as exc:
        parser.parse_row(_row(Days="111110X"))
    assert exc.value.reason == "Invalid days available format: 111110X"
    assert exc.value.field == "default_days_available"

    op = parser.parse_row(_row(Days="1111100"))
    assert format_days_available(op.default_days_available) == "Mon, Tue, Wed, Thu, Fri"


def test_numeric_days_mask_gets_leading_zeros_back():
    op = OperativeRowParser(MAPPING).parse_row(_row(Days=111110))
    assert op.default_days_available == "0111110"


@pytest.mark.parametrize("first_name", [None, "", "   "])
def test_first_name_required(first_name):
    with pytest.raises(ValidationError, match="First name is required"):
        OperativeRowParser(MAPPING).parse_row(_row(**{"First Name": first_name}))


def test_invalid_email_and_phone():
    parser = OperativeRowParser(MAPPING)
    with pytest.raises(ValidationError, match="Invalid email format: ann.example.com"):
        parser.parse_row(_row(Email="ann.example.com"))
    with pytest.raises(ValidationError, match="Invalid phone format: call me"):
        parser.parse_row(_row(Phone="call me"))


def test_unparseable_time_is_dropped(caplog):
    with caplog.at_level(logging.DEBUG, logger="quick_roster"):
        op = OperativeRowParser(MAPPING).parse_row(_row(Start="after lunch"))
    assert op.default_start_time is None
    assert op.default_end_time == "17:00"
    assert "ignoring unparseable default_start_time" in caplog.text


def test_default_location_applies_only_when_missing():
    default = Location(id="loc-1", name="Head Office")
    parser = OperativeRowParser(MAPPING, default_location=default)

    fallback = parser.parse_row(_row(Location=""))
    assert fallback.location == "Head Office"
    assert fallback.location_id == "loc-1"

    given = parser.parse_row(_row())
    assert given.location == "Leeds"
    assert given.location_id is None


def test_unmapped_fields_are_absent():
    op = OperativeRowParser({"first_name": "First Name"}).parse_row(_row())
    assert op.to_record() == {"first_name": "Ann"}
    assert op.full_name == "Ann"


def test_plain_dict_rows_are_accepted():
    op = OperativeRowParser(MAPPING).parse_row({"First Name": " Bob ", "Extra": "ignored"})
    assert op.first_name == "Bob"
    assert op.email is None


def test_day_name_lists_become_masks():
    parser = OperativeRowParser(MAPPING)
    assert parser.parse_row(_row(Days="Mon, Tue, Wed, Thu, Fri")).default_days_available == "1111100"
    assert parser.parse_row(_row(Days="saturday,sunday")).default_days_available == "0000011"
    with pytest.raises(ValidationError, match="Invalid days available format: Mon Tue"):
        parser.parse_row(_row(Days="Mon Tue"))
