"""Normalize Open Food Facts payloads into canonical foods."""

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from food_catalog.domain.foods import (
    BaseUnit,
    CompletenessFlags,
    Envelope,
    EstimateQuality,
    FieldSources,
    FoodKind,
    FoodSource,
    NormalizedFood,
    NormalizedNutrient,
    NormalizedPortion,
    NormalizedServing,
    NutrientBasis,
    off_gid,
)
from food_catalog.domain.off_models import OffNutriments, OffProduct, OffReadResponse
from food_catalog.services.measures import (
    density_from_portions,
    detect_base_unit_from_text,
    parse_serving_grams,
    parse_serving_ml,
)

_logger = logging.getLogger(__name__)

KJ_TO_KCAL = 0.239
SALT_TO_SODIUM = 0.393
GRAMS_TO_MILLIGRAMS = 1000.0

# Each nutrient lists the nutriment fields to try in order, whether the field
# is per serving, and the factor converting it to the target unit.
_NUTRIENT_CHAINS: tuple[
    tuple[int, str, str, tuple[tuple[str, bool, float], ...]], ...
] = (
    (
        1008,
        "Energy",
        "kcal",
        (
            ("energy_kcal_100g", False, 1.0),
            ("energy_kcal_serving", True, 1.0),
            ("energy_kj_100g", False, KJ_TO_KCAL),
            ("energy_kj_serving", True, KJ_TO_KCAL),
            ("energy_100g", False, KJ_TO_KCAL),
            ("energy_serving", True, KJ_TO_KCAL),
        ),
    ),
    (
        1003,
        "Protein",
        "g",
        (("proteins_100g", False, 1.0), ("proteins_serving", True, 1.0)),
    ),
    (
        1005,
        "Carbohydrate, by difference",
        "g",
        (("carbohydrates_100g", False, 1.0), ("carbohydrates_serving", True, 1.0)),
    ),
    (
        1004,
        "Total lipid (fat)",
        "g",
        (("fat_100g", False, 1.0), ("fat_serving", True, 1.0)),
    ),
    (
        1258,
        "Fatty acids, total saturated",
        "g",
        (("saturated_fat_100g", False, 1.0), ("saturated_fat_serving", True, 1.0)),
    ),
    (
        1079,
        "Fiber, total dietary",
        "g",
        (("fiber_100g", False, 1.0), ("fiber_serving", True, 1.0)),
    ),
    (
        2000,
        "Sugars, total including NLEA",
        "g",
        (("sugars_100g", False, 1.0), ("sugars_serving", True, 1.0)),
    ),
    (
        1235,
        "Sugars, added",
        "g",
        (("added_sugars_100g", False, 1.0), ("added_sugars_serving", True, 1.0)),
    ),
    (
        1093,
        "Sodium, Na",
        "mg",
        (
            ("sodium_100g", False, GRAMS_TO_MILLIGRAMS),
            ("sodium_serving", True, GRAMS_TO_MILLIGRAMS),
            ("salt_100g", False, SALT_TO_SODIUM * GRAMS_TO_MILLIGRAMS),
            ("salt_serving", True, SALT_TO_SODIUM * GRAMS_TO_MILLIGRAMS),
        ),
    ),
    (
        1253,
        "Cholesterol",
        "mg",
        (
            ("cholesterol_100g", False, GRAMS_TO_MILLIGRAMS),
            ("cholesterol_serving", True, GRAMS_TO_MILLIGRAMS),
        ),
    ),
    (1087, "Calcium, Ca", "mg", (("calcium_100g", False, GRAMS_TO_MILLIGRAMS),)),
    (1089, "Iron, Fe", "mg", (("iron_100g", False, GRAMS_TO_MILLIGRAMS),)),
    (1092, "Potassium, K", "mg", (("potassium_100g", False, GRAMS_TO_MILLIGRAMS),)),
)


def normalize_off(envelope: Envelope) -> NormalizedFood:
    """Convert an OFF product payload into a :class:`NormalizedFood`.

    Accepts either the read API envelope (``{"status", "product"}``) or a bare
    product. Malformed or missing products yield an empty record.
    """
    gid = envelope.gid or "unknown"
    try:
        product = _decode_product(envelope.raw)
    except ValidationError as exc:
        _logger.warning("Failed to decode OFF payload gid=%s: %s", gid, exc)
        return NormalizedFood.empty(gid, envelope.source)
    if product is None:
        _logger.warning("OFF payload without product gid=%s", gid)
        return NormalizedFood.empty(gid, envelope.source)

    base_unit = detect_base_unit_from_text(product.serving_size, product.categories)
    serving = _extract_serving(product)
    portions = _extract_portions(product)
    nutrients = _extract_nutrients(product, base_unit)
    image_url = product.image_url or product.image_small_url
    ingredients_text = product.ingredients_text or None
    if envelope.gid is None and product.code:
        gid = off_gid(product.code)

    return NormalizedFood(
        gid=gid,
        source=FoodSource.OFF,
        kind=FoodKind.BRANDED,
        name=product.product_name or "Unknown Product",
        base_unit=base_unit,
        barcode=envelope.barcode or product.code,
        fetched_at=envelope.fetched_at,
        brand=product.brands or None,
        barcodes=[product.code] if product.code else [],
        image_url=image_url,
        category_ids=list(product.categories_tags),
        nutrients=nutrients,
        density_g_per_ml=density_from_portions(portions),
        serving=serving,
        portions=portions,
        ingredients_text=ingredients_text,
        completeness=CompletenessFlags.from_presence(
            has_nutrients=bool(nutrients),
            has_serving=serving is not None,
            has_portions=bool(portions),
            has_ingredients=ingredients_text is not None,
            has_image=image_url is not None,
        ),
        field_sources=FieldSources.uniform(FoodSource.OFF),
    )


def _decode_product(raw: object) -> OffProduct | None:
    if isinstance(raw, Mapping) and ("product" in raw or "status" in raw):
        return OffReadResponse.model_validate(raw).product
    return OffProduct.model_validate(raw)


def _extract_serving(product: OffProduct) -> NormalizedServing | None:
    if not product.serving_size:
        return None
    grams = parse_serving_grams(product.serving_size)
    return NormalizedServing(
        amount=product.serving_quantity,
        unit="serving",
        household=product.serving_size,
        grams=grams,
        source=FoodSource.OFF,
        estimate_quality=(
            EstimateQuality.INFERRED if grams is not None else EstimateQuality.GUESSED
        ),
    )


def _extract_portions(product: OffProduct) -> list[NormalizedPortion]:
    portions = [
        NormalizedPortion(
            label="100 g",
            mass_g=100.0,
            vol_ml=None,
            source=FoodSource.OFF,
            estimate_quality=EstimateQuality.EXACT,
        )
    ]
    if product.serving_size:
        grams = parse_serving_grams(product.serving_size)
        portions.append(
            NormalizedPortion(
                label="1 serving",
                mass_g=grams,
                vol_ml=parse_serving_ml(product.serving_size),
                source=FoodSource.OFF,
                estimate_quality=(
                    EstimateQuality.INFERRED
                    if grams is not None
                    else EstimateQuality.GUESSED
                ),
            )
        )
    return portions


def _extract_nutrients(
    product: OffProduct, base_unit: BaseUnit
) -> list[NormalizedNutrient]:
    nutriments = product.nutriments
    if nutriments is None:
        return []
    if base_unit is BaseUnit.MILLILITERS:
        serving_base = parse_serving_ml(product.serving_size)
    else:
        serving_base = parse_serving_grams(product.serving_size)

    nutrients = []
    for nutrient_id, name, unit, chain in _NUTRIENT_CHAINS:
        resolved = _first_available(nutriments, chain, serving_base)
        if resolved is None:
            continue
        amount, basis = resolved
        nutrients.append(
            NormalizedNutrient(
                id=nutrient_id,
                name=name,
                unit=unit,
                amount=amount,
                basis=basis,
                source=FoodSource.OFF,
            )
        )
    return nutrients


def _first_available(
    nutriments: OffNutriments,
    chain: tuple[tuple[str, bool, float], ...],
    serving_base: float | None,
) -> tuple[float, NutrientBasis] | None:
    """Value of the first populated field, rescaled to per-100 when possible."""
    for attribute, per_serving, factor in chain:
        value = getattr(nutriments, attribute)
        if value is None:
            continue
        amount = value * factor
        if not per_serving:
            return amount, NutrientBasis.PER_100_BASE
        if serving_base is not None and serving_base > 0:
            return amount * 100.0 / serving_base, NutrientBasis.PER_100_BASE
        return amount, NutrientBasis.PER_SERVING
    return None
