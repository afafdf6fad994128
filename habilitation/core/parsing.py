import math
import re
from typing import Any, Mapping, Optional

from habilitation.core.errors import ValidationError
from habilitation.core.models import (
    ACTIVITY_FIELDS,
    PUBLICATION_FIELDS,
    ApplicationRecord,
    AuthorshipCounts,
)

# Fields rejected by the strict path when populated with something that is not an integer.
# Every other numeric field is coerced to zero instead.
STRICT_NUMERIC_FIELDS = (
    "lessonsPerYear",
    "guidedWorks",
    "practicalWorks",
    "categoryAPlusFirst",
    "categoryAPlusSecond",
    "categoryAPlusThird",
)

# ASCII digits only; other Unicode digits are not numbers to the form
_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")

# Upper bound on any single count, so uncapped fields stay well inside float range.
MAX_COUNT = 10 ** 6


def parse_int(value: Any) -> Optional[int]:
    """
    Integer-prefix parsing as the form sends it: "12" -> 12, "12abc" -> 12,
    3.7 -> 3, "abc" -> None. Booleans and non-finite floats are not numbers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    m = _INT_PREFIX.match(str(value))
    if m is None:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # longer than the interpreter's int string limit
        return None


def coerce_count(value: Any) -> int:
    n = parse_int(value)
    if n is None or n < 0:
        return 0
    return min(n, MAX_COUNT)


def _is_populated(value: Any) -> bool:
    # 0 and "" count as empty, like the form does
    return value is not None and value != "" and value != 0


def _text(value: Any, strip: bool = True) -> str:
    if value is None:
        return ""
    return str(value).strip() if strip else str(value)


def record_from_mapping(data: Mapping[str, Any]) -> ApplicationRecord:
    """Lenient collector: never raises, unknown or bad numbers become 0."""
    activities = {name: coerce_count(data.get(name)) for name in ACTIVITY_FIELDS}
    publications = {}
    for tier, (first, second, third) in PUBLICATION_FIELDS.items():
        publications[tier] = AuthorshipCounts(
            first=coerce_count(data.get(first)),
            second=coerce_count(data.get(second)),
            third_plus=coerce_count(data.get(third)),
        )
    return ApplicationRecord(
        first_name=_text(data.get("firstName")),
        last_name=_text(data.get("lastName")),
        specialization=_text(data.get("specialization"), strip=False),
        teaching_years=coerce_count(data.get("teachingYears")),
        activities=activities,
        publications=publications,
        university=_text(data.get("university")),
        department=_text(data.get("department")),
        specialization_field=_text(data.get("specializationField")),
        email=_text(data.get("email")),
    )


def validate_application(data: Mapping[str, Any], min_teaching_years: int) -> None:
    """Strict pre-check used by the authoritative path. Raises ValidationError."""
    if not _text(data.get("firstName")) or not _text(data.get("lastName")):
        raise ValidationError("missing-name")

    raw_years = data.get("teachingYears")
    years = parse_int(raw_years)
    if _is_populated(raw_years) and years is None:
        raise ValidationError("invalid-numeric-field", "teachingYears")
    if years is None or years < min_teaching_years:
        raise ValidationError("insufficient-teaching-years")

    for name in STRICT_NUMERIC_FIELDS:
        value = data.get(name)
        if _is_populated(value) and parse_int(value) is None:
            raise ValidationError("invalid-numeric-field", name)
