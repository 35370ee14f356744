"""Canonical food models shared by every catalog source."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class FoodSource(str, Enum):
    """Catalog a record or field came from."""

    FDC = "fdc"
    OFF = "off"


class FoodKind(str, Enum):
    """High level classification of a food record."""

    SUPPLEMENT = "supplement"
    BRANDED = "branded_food"
    GENERIC = "generic_food"


class BaseUnit(str, Enum):
    """Unit in which per-100 nutrient amounts are expressed."""

    GRAMS = "g"
    MILLILITERS = "ml"

    @property
    def per_100_display_name(self) -> str:
        return f"per 100 {self.value}"


class NutrientBasis(str, Enum):
    """Quantity a nutrient amount refers to."""

    PER_100_BASE = "per_100_base"
    PER_SERVING = "per_serving"


class EstimateQuality(str, Enum):
    """How a portion or serving mass was obtained."""

    EXACT = "exact"
    INFERRED = "inferred"
    GUESSED = "guessed"


@dataclass(frozen=True)
class NormalizedNutrient:
    """Single nutrient amount; ``amount=None`` means unknown, not zero."""

    id: int | None
    name: str
    unit: str
    amount: float | None
    basis: NutrientBasis
    source: FoodSource


@dataclass(frozen=True)
class NormalizedPortion:
    """Named portion with its resolved mass and/or volume."""

    label: str
    mass_g: float | None
    vol_ml: float | None
    source: FoodSource
    estimate_quality: EstimateQuality

    @property
    def normalized_label(self) -> str:
        return normalize_label(self.label)


@dataclass(frozen=True)
class NormalizedServing:
    """Declared serving of a food."""

    amount: float | None
    unit: str | None
    household: str | None
    grams: float | None
    source: FoodSource
    estimate_quality: EstimateQuality


@dataclass(frozen=True)
class CompletenessFlags:
    """Which data categories are present on a normalized record."""

    core: bool = False
    label: bool = False
    micros: bool = False
    portions: bool = False
    ingredients: bool = False
    image: bool = False

    @classmethod
    def from_presence(  # noqa: PLR0913
        cls,
        *,
        has_nutrients: bool,
        has_serving: bool,
        has_portions: bool,
        has_ingredients: bool,
        has_image: bool,
    ) -> "CompletenessFlags":
        """Derive flags from what a record actually carries."""
        return cls(
            core=has_nutrients and has_serving,
            label=has_nutrients and has_serving,
            micros=has_nutrients,
            portions=has_portions,
            ingredients=has_ingredients,
            image=has_image,
        )


@dataclass(frozen=True)
class FieldSources:
    """Provenance of each merged field."""

    name: FoodSource = FoodSource.FDC
    brand: FoodSource = FoodSource.FDC
    barcodes: FoodSource = FoodSource.FDC
    image_url: FoodSource = FoodSource.FDC
    nutrients: FoodSource = FoodSource.FDC
    serving: FoodSource = FoodSource.FDC
    portions: FoodSource = FoodSource.FDC
    ingredients: FoodSource = FoodSource.FDC

    @classmethod
    def uniform(cls, source: FoodSource) -> "FieldSources":
        """Attribute every field to a single source."""
        return cls(
            name=source,
            brand=source,
            barcodes=source,
            image_url=source,
            nutrients=source,
            serving=source,
            portions=source,
            ingredients=source,
        )


@dataclass(frozen=True)
class NormalizedFood:
    """Canonical food record produced by the normalizers and the merge engine."""

    gid: str
    source: FoodSource
    kind: FoodKind
    name: str
    base_unit: BaseUnit = BaseUnit.GRAMS
    barcode: str | None = None
    fetched_at: str = ""
    brand: str | None = None
    barcodes: list[str] = field(default_factory=list)
    image_url: str | None = None
    category_ids: list[str] = field(default_factory=list)
    nutrients: list[NormalizedNutrient] = field(default_factory=list)
    density_g_per_ml: float | None = None
    serving: NormalizedServing | None = None
    portions: list[NormalizedPortion] = field(default_factory=list)
    ingredients_text: str | None = None
    completeness: CompletenessFlags = field(default_factory=CompletenessFlags)
    field_sources: FieldSources = field(default_factory=FieldSources)
    user_overrides: Mapping[str, str] = field(default_factory=dict)

    @property
    def per_100_base(self) -> list[NormalizedNutrient]:
        """Nutrients expressed per 100 of ``base_unit``."""
        return [
            nutrient
            for nutrient in self.nutrients
            if nutrient.basis is NutrientBasis.PER_100_BASE
        ]

    @classmethod
    def empty(cls, gid: str, source: FoodSource) -> "NormalizedFood":
        """Structurally valid record carrying no data beyond its identity."""
        return cls(
            gid=gid,
            source=source,
            kind=FoodKind.GENERIC,
            name="Unknown Food",
            field_sources=FieldSources.uniform(source),
        )


@dataclass(frozen=True)
class Envelope:
    """Raw catalog payload together with its fetch metadata."""

    source: FoodSource
    raw: object
    gid: str | None = None
    barcode: str | None = None
    fetched_at: str = ""


def normalize_label(label: str) -> str:
    """Lowercase and trim a portion or household label for matching."""
    return label.strip().lower()


def fdc_gid(fdc_id: int) -> str:
    return f"fdc:{fdc_id}"


def off_gid(barcode: str) -> str:
    return f"off:{barcode}"


def source_from_gid(gid: str) -> FoodSource | None:
    """Return the catalog encoded in a GID prefix, if it names one."""
    prefix, _, _ = gid.partition(":")
    try:
        return FoodSource(prefix)
    except ValueError:
        return None
