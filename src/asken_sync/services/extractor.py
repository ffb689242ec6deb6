"""Nutrient extraction from rendered advice-page text."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from asken_sync.domain.models import NutrientRecord
from asken_sync.services.normalizer import MICROGRAM


@dataclass(frozen=True)
class NutrientLabel:
    """A recognised nutrient and the spellings asken uses for it.

    ``yields_to`` names a label that takes precedence: when it was found,
    this label is not recorded.
    """

    key: str
    spellings: tuple[str, ...]
    yields_to: str | None = None


DEFAULT_VOCABULARY: tuple[NutrientLabel, ...] = (
    NutrientLabel("エネルギー", ("エネルギー",)),
    NutrientLabel("たんぱく質", ("たんぱく質", "タンパク質")),
    NutrientLabel("脂質", ("脂質",)),
    NutrientLabel("炭水化物", ("炭水化物",)),
    NutrientLabel("糖質", ("糖質",), yields_to="炭水化物"),
    NutrientLabel("食物繊維", ("食物繊維",)),
    NutrientLabel("食塩相当量", ("食塩相当量",)),
    NutrientLabel("ナトリウム", ("ナトリウム",)),
    NutrientLabel("カリウム", ("カリウム",)),
    NutrientLabel("カルシウム", ("カルシウム",)),
    NutrientLabel("鉄", ("鉄",)),
    NutrientLabel("ビタミンA", ("ビタミンA",)),
    NutrientLabel("ビタミンB1", ("ビタミンB1",)),
    NutrientLabel("ビタミンB2", ("ビタミンB2",)),
    NutrientLabel("ビタミンB6", ("ビタミンB6",)),
    NutrientLabel("ビタミンB12", ("ビタミンB12",)),
    NutrientLabel("ビタミンC", ("ビタミンC",)),
    NutrientLabel("ビタミンD", ("ビタミンD",)),
    NutrientLabel("ビタミンE", ("ビタミンE",)),
    NutrientLabel("葉酸", ("葉酸",)),
)

DEFAULT_UNITS: tuple[str, ...] = ("kcal", "mg", "µg", "μg", "ug", "g")

# Thousands separators are accepted and dropped from the recorded value.
_AMOUNT = r"([0-9][0-9,]*(?:\.[0-9]+)?)"


def normalize_text(text: str) -> str:
    """Flatten non-breaking spaces and runs of blanks, keep line breaks."""
    cleaned = text.replace("\u00a0", " ").replace("\r", "")
    return re.sub(r"[ \t]+", " ", cleaned).strip()


@dataclass(frozen=True)
class NutrientExtractor:
    """Finds ``label [:] number unit`` fragments for a fixed vocabulary.

    Labels are scanned in vocabulary order and each is matched at most
    once, so the result depends only on the text, not on the order the
    fragments appear in.
    """

    vocabulary: Sequence[NutrientLabel] = DEFAULT_VOCABULARY
    units: Sequence[str] = DEFAULT_UNITS

    def extract(self, text: str) -> NutrientRecord:
        """Return ``label -> "<number><unit>"`` for every label present."""
        flat = normalize_text(text)
        unit_pattern = "|".join(re.escape(unit) for unit in self.units)
        found: NutrientRecord = {}
        for label in self.vocabulary:
            if label.yields_to is not None and label.yields_to in found:
                continue
            for spelling in label.spellings:
                match = re.search(
                    rf"{re.escape(spelling)}\s*[:：]?\s*{_AMOUNT}\s*({unit_pattern})",
                    flat,
                    re.IGNORECASE,
                )
                if match:
                    unit = _canonical_unit(match.group(2))
                    amount = match.group(1).replace(",", "")
                    found[label.key] = f"{amount}{unit}"
                    break
        return found


def _canonical_unit(unit: str) -> str:
    lowered = unit.lower()
    if lowered in {"ug", "μg", "µg"}:
        return MICROGRAM
    return lowered


def choose_best(candidates: Iterable[NutrientRecord]) -> NutrientRecord:
    """Pick the extraction with the most recognised fields.

    Pages carry unrelated summary tables, so the most populated one is
    taken as the nutrient table. Ties keep the earliest candidate.
    """
    best: NutrientRecord = {}
    for candidate in candidates:
        if len(candidate) > len(best):
            best = candidate
    return best
