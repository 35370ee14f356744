"""Dispatch raw catalog envelopes to the matching normalizer."""

from food_catalog.domain.foods import Envelope, FoodSource, NormalizedFood
from food_catalog.services.fdc_normalizer import normalize_fdc
from food_catalog.services.off_normalizer import normalize_off


def normalize(envelope: Envelope) -> NormalizedFood:
    """Normalize an envelope from any supported catalog."""
    if envelope.source is FoodSource.OFF:
        return normalize_off(envelope)
    return normalize_fdc(envelope)
