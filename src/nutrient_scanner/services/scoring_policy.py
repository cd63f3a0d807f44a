"""Thresholds and point weights used by the score engine."""

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from nutrient_scanner.domain.scoring import Nutrient

PENALIZED_NUTRIENTS = (Nutrient.SODIUM, Nutrient.SUGAR, Nutrient.FAT)
REWARDED_NUTRIENTS = (Nutrient.FIBER, Nutrient.PROTEIN)


@dataclass(frozen=True)
class NutrientRule:
    """Two-tier threshold rule for one nutrient, amounts per 100 g."""

    nutrient: Nutrient
    medium_threshold: float
    high_threshold: float
    medium_points: float
    high_points: float

    def __post_init__(self) -> None:
        if self.medium_threshold < 0 or self.high_threshold < self.medium_threshold:
            raise ValueError(
                f"Invalid thresholds for {self.nutrient.value}: "
                f"{self.medium_threshold} / {self.high_threshold}"
            )
        if self.medium_points < 0 or self.high_points < self.medium_points:
            raise ValueError(
                f"Invalid points for {self.nutrient.value}: "
                f"{self.medium_points} / {self.high_points}"
            )


@dataclass(frozen=True)
class ScoringPolicy:
    """Full policy: penalty rules, bonus rules and the bonus ceiling."""

    penalties: tuple[NutrientRule, ...]
    bonuses: tuple[NutrientRule, ...]
    bonus_cap: float

    def __post_init__(self) -> None:
        if self.bonus_cap < 0:
            raise ValueError("bonus_cap must be non-negative")
        for rule in self.penalties:
            if rule.nutrient not in PENALIZED_NUTRIENTS:
                raise ValueError(f"{rule.nutrient.value} cannot carry a penalty")
        for rule in self.bonuses:
            if rule.nutrient not in REWARDED_NUTRIENTS:
                raise ValueError(f"{rule.nutrient.value} cannot earn a bonus")
        nutrients = [rule.nutrient for rule in (*self.penalties, *self.bonuses)]
        if len(nutrients) != len(set(nutrients)):
            raise ValueError("Each nutrient may appear in only one rule")


DEFAULT_POLICY = ScoringPolicy(
    penalties=(
        NutrientRule(Nutrient.SUGAR, 5.0, 22.5, 10, 25),
        NutrientRule(Nutrient.FAT, 3.0, 17.5, 10, 25),
        NutrientRule(Nutrient.SODIUM, 120.0, 300.0, 10, 25),
    ),
    bonuses=(
        NutrientRule(Nutrient.FIBER, 3.0, 6.0, 4, 8),
        NutrientRule(Nutrient.PROTEIN, 5.0, 10.0, 4, 8),
    ),
    bonus_cap=15,
)


class _RuleDocument(BaseModel):
    nutrient: Nutrient
    medium_threshold: float = Field(ge=0)
    high_threshold: float = Field(ge=0)
    medium_points: float = Field(ge=0)
    high_points: float = Field(ge=0)


class _PolicyDocument(BaseModel):
    penalties: list[_RuleDocument]
    bonuses: list[_RuleDocument]
    bonus_cap: float = Field(ge=0)


def parse_scoring_policy(payload: dict[str, object]) -> ScoringPolicy:
    """Build a policy from a JSON-compatible mapping."""
    document = _PolicyDocument.model_validate(payload)
    return ScoringPolicy(
        penalties=tuple(
            NutrientRule(**rule.model_dump()) for rule in document.penalties
        ),
        bonuses=tuple(NutrientRule(**rule.model_dump()) for rule in document.bonuses),
        bonus_cap=document.bonus_cap,
    )


def load_scoring_policy(path: str | Path | None) -> ScoringPolicy:
    """Load a policy from a JSON file, or return the default policy."""
    if path is None:
        return DEFAULT_POLICY
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_scoring_policy(payload)
