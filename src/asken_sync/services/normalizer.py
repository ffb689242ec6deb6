"""Canonical spelling for scraped nutrient values."""

import re

from asken_sync.domain.models import NutrientRecord

MICROGRAM = "µg"

_WHITESPACE = re.compile(r"\s+")
# ASCII "ug" in any case and the Greek-mu spelling.
_MICROGRAM_SPELLINGS = re.compile("(?:ug|μg)", re.IGNORECASE)


def normalize_value(value: str) -> str:
    """Drop all whitespace and unify microgram units to the micro sign."""
    compact = _WHITESPACE.sub("", value)
    return _MICROGRAM_SPELLINGS.sub(MICROGRAM, compact)


def normalize_nutrients(record: NutrientRecord) -> NutrientRecord:
    """Normalize every value of a nutrient record."""
    return {label: normalize_value(value) for label, value in record.items()}
