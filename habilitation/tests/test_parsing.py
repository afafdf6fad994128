import pytest

from habilitation.core.errors import ValidationError
from habilitation.core.models import AuthorshipCounts, PublicationTier
from habilitation.core.parsing import (
    MAX_COUNT,
    coerce_count,
    parse_int,
    record_from_mapping,
    validate_application,
)


@pytest.mark.parametrize("value, expected", [
    ("12", 12),
    (" 7 ", 7),
    ("12abc", 12),
    (3.7, 3),
    (4, 4),
    ("-2", -2),
    ("abc", None),
    ("", None),
    (None, None),
    (True, None),
    (float("nan"), None),
    ("\u0663", None),
    ("1\u0663", 1),
    ("1" * 5000, None),
])
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_coerce_count_floors_at_zero():
    assert coerce_count("-5") == 0
    assert coerce_count("abc") == 0
    assert coerce_count(None) == 0
    assert coerce_count("9") == 9


def test_record_from_mapping_is_lenient():
    record = record_from_mapping({
        "firstName": "  Amar ",
        "lastName": "Said",
        "specialization": "sciences",
        "teachingYears": "x",
        "lessonsPerYear": "3",
        "onlineLessons": "not a number",
        "categoryAFirst": 2,
        "categoryCThird": "1",
    })
    assert record.first_name == "Amar"
    assert record.teaching_years == 0
    assert record.activity("lessonsPerYear") == 3
    assert record.activity("onlineLessons") == 0
    assert record.authorship(PublicationTier.A) == AuthorshipCounts(first=2)
    assert record.authorship(PublicationTier.C) == AuthorshipCounts(third_plus=1)


def test_record_from_mapping_empty():
    record = record_from_mapping({})
    assert record.first_name == ""
    assert record.teaching_years == 0
    assert all(v == 0 for v in record.activities.values())


def test_validate_accepts_complete_application(applicant):
    validate_application(applicant, 3)


@pytest.mark.parametrize("first, last", [("", "Said"), ("Amar", "   "), (None, "Said")])
def test_validate_rejects_missing_name(applicant, first, last):
    applicant.update(firstName=first, lastName=last)
    with pytest.raises(ValidationError) as exc:
        validate_application(applicant, 3)
    assert exc.value.code == "missing-name"


@pytest.mark.parametrize("years", [None, "", 0, 1, "2"])
def test_validate_rejects_low_teaching_years(applicant, years):
    applicant["teachingYears"] = years
    with pytest.raises(ValidationError) as exc:
        validate_application(applicant, 3)
    assert exc.value.code == "insufficient-teaching-years"


def test_validate_rejects_unparseable_teaching_years(applicant):
    applicant["teachingYears"] = "many"
    with pytest.raises(ValidationError) as exc:
        validate_application(applicant, 3)
    assert exc.value.code == "invalid-numeric-field"
    assert exc.value.field == "teachingYears"


@pytest.mark.parametrize("field", ["lessonsPerYear", "guidedWorks", "categoryAPlusSecond"])
def test_validate_rejects_strict_numeric_field(applicant, field):
    applicant[field] = "ten"
    with pytest.raises(ValidationError) as exc:
        validate_application(applicant, 3)
    assert exc.value.code == "invalid-numeric-field"
    assert exc.value.field == field


def test_validate_leaves_other_fields_lenient(applicant):
    applicant["onlineLessons"] = "ten"
    applicant["categoryBFirst"] = "??"
    validate_application(applicant, 3)


def test_validate_threshold_is_a_parameter(applicant):
    applicant["teachingYears"] = 4
    with pytest.raises(ValidationError):
        validate_application(applicant, 5)


def test_coerce_count_is_bounded():
    assert coerce_count(10 ** 400) == MAX_COUNT
    assert coerce_count(1.7e308) == MAX_COUNT
    assert coerce_count("1" * 5000) == 0


def test_record_keeps_specialization_as_sent():
    record = record_from_mapping({"specialization": " sciences "})
    assert record.specialization == " sciences "


@pytest.mark.parametrize("value", ["٣", "1" * 5000])
def test_validate_rejects_non_ascii_and_oversized_numbers(applicant, value):
    applicant["lessonsPerYear"] = value
    with pytest.raises(ValidationError) as exc:
        validate_application(applicant, 3)
    assert exc.value.code == "invalid-numeric-field"
    assert exc.value.field == "lessonsPerYear"


def test_lenient_path_scores_arabic_indic_digits_as_zero():
    record = record_from_mapping({"lessonsPerYear": "٣", "teachingYears": "٥"})
    assert record.activity("lessonsPerYear") == 0
    assert record.teaching_years == 0
