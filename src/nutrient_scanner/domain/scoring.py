"""Nutrient profile and scoring domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class InvalidProfile(ValueError):
    """Raised when a nutrient profile cannot be scored."""


class Unit(str, Enum):
    """Units a nutrient amount can be expressed in."""

    KCAL = "kcal"
    G = "g"
    MG = "mg"


class Nutrient(str, Enum):
    """Tracked nutrients, in profile field order."""

    CALORIES = "calories"
    PROTEIN = "protein"
    CARBOHYDRATES = "carbohydrates"
    FAT = "fat"
    FIBER = "fiber"
    SUGAR = "sugar"
    SODIUM = "sodium"

    @property
    def unit(self) -> Unit:
        """Unit the nutrient must be expressed in for scoring."""
        if self is Nutrient.CALORIES:
            return Unit.KCAL
        if self is Nutrient.SODIUM:
            return Unit.MG
        return Unit.G


class Rating(str, Enum):
    """Rating bands for a quality score."""

    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    VERY_GOOD = "VeryGood"
    EXCELLENT = "Excellent"


@dataclass(frozen=True)
class NutrientAmount:
    """Amount of a nutrient per reference quantity, e.g. 8 g per 100g."""

    amount_per_reference_quantity: float
    unit: Unit
    reference_quantity: str = "100g"


@dataclass(frozen=True)
class NutrientProfile:
    """The seven tracked nutrients of a product on one reference quantity."""

    calories: NutrientAmount | None
    protein: NutrientAmount | None
    carbohydrates: NutrientAmount | None
    fat: NutrientAmount | None
    fiber: NutrientAmount | None
    sugar: NutrientAmount | None
    sodium: NutrientAmount | None

    @classmethod
    def from_mapping(
        cls, nutrients: Mapping[str, NutrientAmount | None]
    ) -> "NutrientProfile":
        """Build a profile from a name-keyed mapping.

        Missing nutrients raise ``InvalidProfile``; nothing is defaulted.
        """
        missing = [n.value for n in Nutrient if nutrients.get(n.value) is None]
        if missing:
            raise InvalidProfile(f"Missing nutrients: {', '.join(missing)}")
        return cls(**{n.value: nutrients[n.value] for n in Nutrient})

    def get(self, nutrient: Nutrient) -> NutrientAmount | None:
        """Return the amount recorded for a nutrient."""
        return getattr(self, nutrient.value)

    @property
    def reference_quantity(self) -> str | None:
        """Shared reference quantity, if all nutrients agree on one."""
        quantities = {
            value.reference_quantity
            for value in (self.get(n) for n in Nutrient)
            if value is not None
        }
        if len(quantities) == 1:
            return quantities.pop()
        return None


def validate_profile(profile: NutrientProfile) -> None:
    """Ensure a profile is complete, non-negative and on one basis."""
    reference_quantities: set[str] = set()
    for nutrient in Nutrient:
        value = profile.get(nutrient)
        if value is None:
            raise InvalidProfile(f"Missing nutrient: {nutrient.value}")
        amount = value.amount_per_reference_quantity
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            raise InvalidProfile(f"Amount for {nutrient.value} is not a number")
        if not math.isfinite(amount):
            raise InvalidProfile(f"Amount for {nutrient.value} is not finite")
        if amount < 0:
            raise InvalidProfile(
                f"Amount for {nutrient.value} is negative: {amount}"
            )
        if value.unit != nutrient.unit:
            raise InvalidProfile(
                f"Unit for {nutrient.value} must be {nutrient.unit.value}, "
                f"got {getattr(value.unit, 'value', value.unit)}"
            )
        reference_quantities.add(value.reference_quantity)
    if len(reference_quantities) > 1:
        raise InvalidProfile(
            "Nutrients use different reference quantities: "
            + ", ".join(sorted(reference_quantities))
        )


class WarningCode(str, Enum):
    """Codes for adverse nutrient findings."""

    HIGH_SODIUM = "high_sodium"
    HIGH_SUGAR = "high_sugar"
    HIGH_FAT = "high_fat"


class BenefitCode(str, Enum):
    """Codes for beneficial nutrient findings."""

    SOURCE_OF_FIBER = "source_of_fiber"
    HIGH_FIBER = "high_fiber"
    SOURCE_OF_PROTEIN = "source_of_protein"
    HIGH_PROTEIN = "high_protein"


@dataclass(frozen=True)
class HealthWarning:
    """An adverse finding shown next to the score."""

    code: WarningCode
    message: str
    severity: int


@dataclass(frozen=True)
class Benefit:
    """A beneficial finding shown next to the score."""

    code: BenefitCode
    message: str
    strength: int


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one nutrient profile."""

    score: int
    rating: Rating
    warnings: tuple[HealthWarning, ...]
    benefits: tuple[Benefit, ...]
