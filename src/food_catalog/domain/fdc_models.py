"""Pydantic models for USDA FoodData Central payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _FdcModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FdcNutrientRef(_FdcModel):
    """Nested nutrient descriptor of a food nutrient entry."""

    id: int | None = None
    number: str | None = None
    name: str | None = None
    unit_name: str | None = Field(default=None, alias="unitName")


class FdcFoodNutrient(_FdcModel):
    """Entry of ``foodNutrients``; search and detail payloads differ in shape."""

    id: int | None = None
    amount: float | None = None
    value: float | None = None
    nutrient: FdcNutrientRef | None = None
    nutrient_id: int | None = Field(default=None, alias="nutrientId")
    nutrient_name: str | None = Field(default=None, alias="nutrientName")
    unit_name: str | None = Field(default=None, alias="unitName")

    @property
    def resolved_id(self) -> int | None:
        if self.nutrient is not None and self.nutrient.id is not None:
            return self.nutrient.id
        return self.nutrient_id

    @property
    def resolved_amount(self) -> float | None:
        return self.amount if self.amount is not None else self.value

    @property
    def resolved_name(self) -> str:
        if self.nutrient is not None and self.nutrient.name:
            return self.nutrient.name
        return self.nutrient_name or ""

    @property
    def resolved_unit(self) -> str:
        if self.nutrient is not None and self.nutrient.unit_name:
            return self.nutrient.unit_name
        return self.unit_name or ""


class FdcLabelValue(_FdcModel):
    value: float | None = None


class FdcLabelNutrients(_FdcModel):
    """Per-serving label values of branded foods."""

    calories: FdcLabelValue | None = None
    fat: FdcLabelValue | None = None
    saturated_fat: FdcLabelValue | None = Field(default=None, alias="saturatedFat")
    trans_fat: FdcLabelValue | None = Field(default=None, alias="transFat")
    cholesterol: FdcLabelValue | None = None
    sodium: FdcLabelValue | None = None
    carbohydrates: FdcLabelValue | None = None
    fiber: FdcLabelValue | None = None
    sugars: FdcLabelValue | None = None
    added_sugars: FdcLabelValue | None = Field(default=None, alias="addedSugars")
    protein: FdcLabelValue | None = None
    calcium: FdcLabelValue | None = None
    iron: FdcLabelValue | None = None
    potassium: FdcLabelValue | None = None


class FdcMeasureUnit(_FdcModel):
    name: str | None = None
    abbreviation: str | None = None


class FdcFoodPortion(_FdcModel):
    """Household measure of a food with its gram weight."""

    amount: float | None = None
    gram_weight: float | None = Field(default=None, alias="gramWeight")
    portion_description: str | None = Field(default=None, alias="portionDescription")
    modifier: str | None = None
    measure_unit: FdcMeasureUnit | None = Field(default=None, alias="measureUnit")

    @property
    def label(self) -> str:
        description = self.portion_description
        if description and description != "Quantity not specified":
            return description
        unit_name = ""
        if self.measure_unit is not None and self.measure_unit.name != "undetermined":
            unit_name = self.measure_unit.name or ""
        parts = [
            f"{self.amount:g}" if self.amount is not None else "",
            unit_name,
            self.modifier or "",
        ]
        return " ".join(part for part in parts if part) or "portion"


class FdcFood(_FdcModel):
    """Food detail payload returned by ``/food/{fdcId}``."""

    fdc_id: int = Field(alias="fdcId")
    data_type: str | None = Field(default=None, alias="dataType")
    description: str = ""
    brand_owner: str | None = Field(default=None, alias="brandOwner")
    brand_name: str | None = Field(default=None, alias="brandName")
    gtin_upc: str | None = Field(default=None, alias="gtinUpc")
    ingredients: str | None = None
    serving_size: float | None = Field(default=None, alias="servingSize")
    serving_size_unit: str | None = Field(default=None, alias="servingSizeUnit")
    household_serving_full_text: str | None = Field(
        default=None, alias="householdServingFullText"
    )
    branded_food_category: str | None = Field(default=None, alias="brandedFoodCategory")
    food_nutrients: list[FdcFoodNutrient] = Field(
        default_factory=list, alias="foodNutrients"
    )
    food_portions: list[FdcFoodPortion] = Field(
        default_factory=list, alias="foodPortions"
    )
    label_nutrients: FdcLabelNutrients | None = Field(
        default=None, alias="labelNutrients"
    )


class FdcSearchFood(_FdcModel):
    """Single hit of ``/foods/search``."""

    fdc_id: int = Field(alias="fdcId")
    description: str = ""
    data_type: str | None = Field(default=None, alias="dataType")
    brand_owner: str | None = Field(default=None, alias="brandOwner")
    brand_name: str | None = Field(default=None, alias="brandName")
    gtin_upc: str | None = Field(default=None, alias="gtinUpc")
    food_nutrients: list[FdcFoodNutrient] = Field(
        default_factory=list, alias="foodNutrients"
    )


class FdcSearchResult(_FdcModel):
    total_hits: int | None = Field(default=None, alias="totalHits")
    current_page: int | None = Field(default=None, alias="currentPage")
    total_pages: int | None = Field(default=None, alias="totalPages")
    foods: list[FdcSearchFood] = Field(default_factory=list)
