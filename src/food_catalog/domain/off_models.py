"""Pydantic models for Open Food Facts payloads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _OffModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OffNutriments(_OffModel):
    """Subset of OFF ``nutriments``; masses are in grams, energy in kcal or kJ."""

    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    energy_kj_100g: float | None = Field(default=None, alias="energy-kj_100g")
    energy_100g: float | None = None
    energy_kcal_serving: float | None = Field(
        default=None, alias="energy-kcal_serving"
    )
    energy_kj_serving: float | None = Field(default=None, alias="energy-kj_serving")
    energy_serving: float | None = None

    fat_100g: float | None = None
    fat_serving: float | None = None
    saturated_fat_100g: float | None = Field(default=None, alias="saturated-fat_100g")
    saturated_fat_serving: float | None = Field(
        default=None, alias="saturated-fat_serving"
    )
    carbohydrates_100g: float | None = None
    carbohydrates_serving: float | None = None
    sugars_100g: float | None = None
    sugars_serving: float | None = None
    added_sugars_100g: float | None = Field(default=None, alias="added-sugars_100g")
    added_sugars_serving: float | None = Field(
        default=None, alias="added-sugars_serving"
    )
    fiber_100g: float | None = None
    fiber_serving: float | None = None
    proteins_100g: float | None = None
    proteins_serving: float | None = None
    salt_100g: float | None = None
    salt_serving: float | None = None
    sodium_100g: float | None = None
    sodium_serving: float | None = None
    cholesterol_100g: float | None = None
    cholesterol_serving: float | None = None

    calcium_100g: float | None = None
    iron_100g: float | None = None
    potassium_100g: float | None = None


class OffProduct(_OffModel):
    """Product record of the OFF read API."""

    code: str | None = None
    product_name: str | None = None
    brands: str | None = None
    quantity: str | None = None
    categories: str | None = None
    categories_tags: list[str] = Field(default_factory=list)
    ingredients_text: str | None = None
    image_url: str | None = None
    image_small_url: str | None = None
    nutriments: OffNutriments | None = None
    nutrition_data_per: str | None = None
    serving_size: str | None = None
    serving_quantity: float | None = None

    @field_validator("serving_quantity", mode="before")
    @classmethod
    def _parse_serving_quantity(cls, value: object) -> object:
        """OFF sends the quantity as a number or a numeric string."""
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return value


class OffReadResponse(_OffModel):
    """Envelope of ``/product/{barcode}``; ``status`` is 1 when found."""

    status: int | None = None
    code: str | None = None
    product: OffProduct | None = None

    @property
    def found(self) -> bool:
        return self.status == 1 and self.product is not None
