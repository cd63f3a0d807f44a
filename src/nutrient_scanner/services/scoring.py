"""Deterministic nutrient quality scoring.

Scores start from a baseline of 100. Adverse nutrients (sodium, sugar, fat)
subtract points by tier, beneficial nutrients (fiber, protein) add points up to
a ceiling. The total is clamped to [0, 100], rounded half-up and mapped to a
rating band. Everything here is pure: no I/O, no logging, no shared state.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from nutrient_scanner.domain.scoring import (
    Benefit,
    BenefitCode,
    HealthWarning,
    InvalidProfile,
    Nutrient,
    NutrientAmount,
    NutrientProfile,
    Rating,
    ScoreResult,
    WarningCode,
    validate_profile,
)
from nutrient_scanner.services.scoring_policy import (
    DEFAULT_POLICY,
    NutrientRule,
    ScoringPolicy,
)

BASELINE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100

# Inclusive lower bounds, highest first.
_RATING_BANDS = (
    (90, Rating.EXCELLENT),
    (80, Rating.VERY_GOOD),
    (60, Rating.GOOD),
    (40, Rating.FAIR),
    (0, Rating.POOR),
)

_PRIORITY = {
    Nutrient.SODIUM: 0,
    Nutrient.SUGAR: 1,
    Nutrient.FAT: 2,
    Nutrient.FIBER: 3,
    Nutrient.PROTEIN: 4,
}

_WARNINGS = {
    Nutrient.SODIUM: (WarningCode.HIGH_SODIUM, "High in sodium"),
    Nutrient.SUGAR: (WarningCode.HIGH_SUGAR, "High in sugar"),
    Nutrient.FAT: (WarningCode.HIGH_FAT, "High in fat"),
}

_BENEFITS = {
    (Nutrient.FIBER, "medium"): (BenefitCode.SOURCE_OF_FIBER, "Source of fiber"),
    (Nutrient.FIBER, "high"): (BenefitCode.HIGH_FIBER, "High in fiber"),
    (Nutrient.PROTEIN, "medium"): (
        BenefitCode.SOURCE_OF_PROTEIN,
        "Source of protein",
    ),
    (Nutrient.PROTEIN, "high"): (BenefitCode.HIGH_PROTEIN, "High in protein"),
}


class Tier(str, Enum):
    """Threshold classification of a nutrient amount."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def compute_score(
    profile: NutrientProfile, policy: ScoringPolicy = DEFAULT_POLICY
) -> ScoreResult:
    """Score a validated, normalized nutrient profile."""
    validate_profile(profile)

    total = float(BASELINE_SCORE)
    warnings: list[tuple[Nutrient, HealthWarning]] = []
    for rule in policy.penalties:
        amount = _amount(profile, rule.nutrient)
        tier = penalty_tier(amount, rule)
        points = _points(tier, rule)
        total -= points
        if tier is Tier.HIGH:
            code, message = _WARNINGS[rule.nutrient]
            warnings.append(
                (
                    rule.nutrient,
                    HealthWarning(
                        code=code, message=message, severity=round_half_up(points)
                    ),
                )
            )

    bonus_total = 0.0
    benefits: list[tuple[Nutrient, Benefit]] = []
    for rule in policy.bonuses:
        amount = _amount(profile, rule.nutrient)
        tier = bonus_tier(amount, rule)
        if tier is Tier.LOW:
            continue
        points = _points(tier, rule)
        bonus_total += points
        code, message = _BENEFITS[(rule.nutrient, tier.value)]
        benefits.append(
            (
                rule.nutrient,
                Benefit(code=code, message=message, strength=round_half_up(points)),
            )
        )
    total += min(bonus_total, policy.bonus_cap)

    score = round_half_up(min(max(total, MIN_SCORE), MAX_SCORE))
    return ScoreResult(
        score=score,
        rating=rating_for(score),
        warnings=tuple(
            warning
            for _, warning in sorted(
                warnings, key=lambda item: (-item[1].severity, _PRIORITY[item[0]])
            )
        ),
        benefits=tuple(
            benefit
            for _, benefit in sorted(
                benefits, key=lambda item: (-item[1].strength, _PRIORITY[item[0]])
            )
        ),
    )


def penalty_tier(amount: float, rule: NutrientRule) -> Tier:
    """Classify an adverse nutrient amount."""
    if amount > rule.high_threshold:
        return Tier.HIGH
    if amount >= rule.medium_threshold:
        return Tier.MEDIUM
    return Tier.LOW


def bonus_tier(amount: float, rule: NutrientRule) -> Tier:
    """Classify a beneficial nutrient amount."""
    if amount >= rule.high_threshold:
        return Tier.HIGH
    if amount >= rule.medium_threshold:
        return Tier.MEDIUM
    return Tier.LOW


def rating_for(score: int) -> Rating:
    """Map a 0-100 score to its rating band."""
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValueError(f"Score out of range: {score}")
    for lower_bound, rating in _RATING_BANDS:
        if score >= lower_bound:
            return rating
    return Rating.POOR


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def normalize_profile(
    profile: NutrientProfile, grams_per_reference: float
) -> NutrientProfile:
    """Rescale a profile expressed per serving to a per-100g basis."""
    if not math.isfinite(grams_per_reference) or grams_per_reference <= 0:
        raise InvalidProfile(
            "Reference quantity must weigh a finite amount above 0 g, "
            f"got {grams_per_reference}"
        )
    validate_profile(profile)
    factor = 100.0 / grams_per_reference
    return NutrientProfile.from_mapping(
        {
            nutrient.value: NutrientAmount(
                amount_per_reference_quantity=_amount(profile, nutrient) * factor,
                unit=nutrient.unit,
                reference_quantity="100g",
            )
            for nutrient in Nutrient
        }
    )


def _amount(profile: NutrientProfile, nutrient: Nutrient) -> float:
    value = profile.get(nutrient)
    if value is None:
        raise InvalidProfile(f"Missing nutrient: {nutrient.value}")
    return float(value.amount_per_reference_quantity)


def _points(tier: Tier, rule: NutrientRule) -> float:
    if tier is Tier.HIGH:
        return rule.high_points
    if tier is Tier.MEDIUM:
        return rule.medium_points
    return 0.0
