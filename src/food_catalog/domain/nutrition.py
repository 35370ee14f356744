"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile for a food item.

    Values default to zero when a source does not report them, so zero here
    means "not found" as often as it means "confirmed zero".
    """

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from an FDC search."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None
    gtin_upc: str | None
    macros: MacroProfile

    @property
    def gid(self) -> str:
        """Global identifier of the summarized food."""
        return f"fdc:{self.fdc_id}"
