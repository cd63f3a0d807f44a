"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from nutrient_scanner.domain.scoring import (
    InvalidProfile,
    NutrientAmount,
    NutrientProfile,
    Unit,
)


class NutrientAmountPayload(BaseModel):
    """One nutrient quantity as sent by the app."""

    amount: float
    unit: str
    per: str = "100g"

    def to_domain(self, name: str) -> NutrientAmount:
        """Convert to a domain amount, rejecting unknown units."""
        try:
            unit = Unit(self.unit.strip().lower())
        except ValueError as exc:
            raise InvalidProfile(f"Unknown unit for {name}: {self.unit!r}") from exc
        return NutrientAmount(
            amount_per_reference_quantity=self.amount,
            unit=unit,
            reference_quantity=self.per,
        )


class ScoreRequest(BaseModel):
    """Request body for scoring a nutrient profile directly."""

    nutrients: dict[str, NutrientAmountPayload | None]
    serving_grams: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Weight of the reference quantity; rescales to per 100 g.",
    )

    def to_profile(self) -> NutrientProfile:
        """Build the domain profile; missing nutrients raise InvalidProfile."""
        return NutrientProfile.from_mapping(
            {
                name: None if payload is None else payload.to_domain(name)
                for name, payload in self.nutrients.items()
            }
        )
