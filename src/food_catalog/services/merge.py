"""Merge normalized records of the same food from two catalogs."""

from dataclasses import replace

from food_catalog.domain.foods import (
    CompletenessFlags,
    FieldSources,
    FoodSource,
    NormalizedFood,
    NormalizedNutrient,
    NormalizedPortion,
    normalize_label,
)

PORTION_MASS_TOLERANCE_G = 1.0


def merge_foods(
    primary: NormalizedFood | None, secondary: NormalizedFood | None
) -> NormalizedFood | None:
    """Merge ``secondary`` into ``primary``.

    Identity, serving, brand, barcode and density come from the primary record
    when it has them; image and ingredients come from the secondary record when
    it has them. Nutrients and portions are unions that never let the secondary
    record override the primary one. Merging the same secondary twice is a
    no-op.
    """
    if primary is None:
        return secondary
    if secondary is None:
        return primary

    nutrients = merge_nutrients(primary.nutrients, secondary.nutrients)
    portions = merge_portions(primary.portions, secondary.portions)
    serving = primary.serving if primary.serving is not None else secondary.serving
    brand = primary.brand if primary.brand is not None else secondary.brand

    if secondary.image_url is not None:
        image_url = secondary.image_url
        image_source = secondary.field_sources.image_url
    else:
        image_url = primary.image_url
        image_source = primary.field_sources.image_url
    if secondary.ingredients_text is not None:
        ingredients_text = secondary.ingredients_text
        ingredients_source = secondary.field_sources.ingredients
    else:
        ingredients_text = primary.ingredients_text
        ingredients_source = primary.field_sources.ingredients

    field_sources = FieldSources(
        name=primary.field_sources.name,
        brand=_pick_source(primary.brand, primary, secondary, "brand"),
        barcodes=primary.field_sources.barcodes,
        image_url=image_source,
        nutrients=_pick_source(primary.nutrients, primary, secondary, "nutrients"),
        serving=_pick_source(primary.serving, primary, secondary, "serving"),
        portions=_pick_source(primary.portions, primary, secondary, "portions"),
        ingredients=ingredients_source,
    )
    completeness = CompletenessFlags.from_presence(
        has_nutrients=any(n.amount is not None for n in nutrients),
        has_serving=serving is not None,
        has_portions=bool(portions),
        has_ingredients=ingredients_text is not None,
        has_image=image_url is not None,
    )
    return replace(
        primary,
        barcode=primary.barcode if primary.barcode is not None else secondary.barcode,
        brand=brand,
        image_url=image_url,
        nutrients=nutrients,
        density_g_per_ml=(
            primary.density_g_per_ml
            if primary.density_g_per_ml is not None
            else secondary.density_g_per_ml
        ),
        serving=serving,
        portions=portions,
        ingredients_text=ingredients_text,
        completeness=completeness,
        field_sources=field_sources,
    )


def _pick_source(
    primary_value: object,
    primary: NormalizedFood,
    secondary: NormalizedFood,
    field_name: str,
) -> FoodSource:
    """Source of the primary field when it has a value, else the secondary's."""
    has_value = primary_value is not None and primary_value != []
    owner = primary if has_value else secondary
    return getattr(owner.field_sources, field_name)


def merge_nutrients(
    primary: list[NormalizedNutrient], secondary: list[NormalizedNutrient]
) -> list[NormalizedNutrient]:
    """Primary nutrients plus secondary ones that match none by id or name/unit.

    A primary entry with an unknown amount yields to a known secondary one.
    """
    merged = list(primary)
    anchors = list(primary)
    for nutrient in secondary:
        matches = [known for known in anchors if _same_nutrient(known, nutrient)]
        if not matches:
            merged.append(nutrient)
        elif nutrient.amount is not None and all(m.amount is None for m in matches):
            merged = [n for n in merged if not any(n is m for m in matches)]
            anchors = [n for n in anchors if not any(n is m for m in matches)]
            merged.append(nutrient)
            anchors.append(nutrient)
    return merged


def _same_nutrient(first: NormalizedNutrient, second: NormalizedNutrient) -> bool:
    if first.id is not None and first.id == second.id:
        return True
    return (first.name.lower(), first.unit.lower()) == (
        second.name.lower(),
        second.unit.lower(),
    )


def merge_portions(
    primary: list[NormalizedPortion], secondary: list[NormalizedPortion]
) -> list[NormalizedPortion]:
    """Primary portions plus secondary ones that conflict with none of them."""
    merged = list(primary)
    for portion in secondary:
        if not any(_portions_conflict(existing, portion) for existing in primary):
            merged.append(portion)
    return merged


def _portions_conflict(first: NormalizedPortion, second: NormalizedPortion) -> bool:
    if normalize_label(first.label) == normalize_label(second.label):
        return True
    if first.mass_g is None or second.mass_g is None:
        return False
    return abs(first.mass_g - second.mass_g) < PORTION_MASS_TOLERANCE_G
