"""Fixture-backed catalog clients for local development and demos."""

import copy
from dataclasses import dataclass, field

import httpx

from food_catalog.adapters.fdc_client import FdcClient
from food_catalog.adapters.off_client import OffClient


def _nutrient(
    nutrient_id: int, name: str, unit: str, amount: float
) -> dict[str, object]:
    return {
        "nutrient": {"id": nutrient_id, "name": name, "unitName": unit},
        "amount": amount,
    }


_FDC_FOODS: dict[int, dict[str, object]] = {
    171688: {
        "fdcId": 171688,
        "dataType": "SR Legacy",
        "description": "Apples, raw, with skin",
        "foodNutrients": [
            _nutrient(1008, "Energy", "kcal", 52.0),
            _nutrient(1003, "Protein", "g", 0.26),
            _nutrient(1004, "Total lipid (fat)", "g", 0.17),
            _nutrient(1005, "Carbohydrate, by difference", "g", 13.8),
            _nutrient(1079, "Fiber, total dietary", "g", 2.4),
            _nutrient(2000, "Sugars, total including NLEA", "g", 10.4),
            _nutrient(1093, "Sodium, Na", "mg", 1.0),
        ],
        "foodPortions": [
            {
                "amount": 1.0,
                "gramWeight": 109.0,
                "modifier": "quartered or chopped",
                "measureUnit": {"name": "cup", "abbreviation": "cup"},
            },
            {
                "amount": 1.0,
                "gramWeight": 182.0,
                "portionDescription": "1 medium (3\" dia)",
                "measureUnit": {"name": "undetermined"},
            },
        ],
    },
    2257046: {
        "fdcId": 2257046,
        "dataType": "Branded",
        "description": "Creamy Peanut Butter",
        "brandOwner": "The J.M. Smucker Company",
        "brandName": "JIF",
        "gtinUpc": "051500255162",
        "ingredients": "ROASTED PEANUTS, SUGAR, MOLASSES, SALT.",
        "servingSize": 32.0,
        "servingSizeUnit": "g",
        "householdServingFullText": "2 tbsp",
        "brandedFoodCategory": "Nut & Seed Butters",
        "foodNutrients": [
            _nutrient(1008, "Energy", "kcal", 594.0),
            _nutrient(1003, "Protein", "g", 21.9),
            _nutrient(1004, "Total lipid (fat)", "g", 50.0),
            _nutrient(1005, "Carbohydrate, by difference", "g", 21.9),
            _nutrient(1258, "Fatty acids, total saturated", "g", 10.9),
            _nutrient(1093, "Sodium, Na", "mg", 438.0),
        ],
        "labelNutrients": {
            "calories": {"value": 190.0},
            "fat": {"value": 16.0},
            "protein": {"value": 7.0},
            "carbohydrates": {"value": 7.0},
            "sugars": {"value": 3.0},
        },
    },
    2340760: {
        "fdcId": 2340760,
        "dataType": "Branded",
        "description": "Whole Milk",
        "brandOwner": "Horizon Organic Dairy",
        "gtinUpc": "742365004445",
        "servingSize": 240.0,
        "servingSizeUnit": "ml",
        "householdServingFullText": "1 cup",
        "brandedFoodCategory": "Milk",
        "foodNutrients": [
            _nutrient(1008, "Energy", "kcal", 62.0),
            _nutrient(1003, "Protein", "g", 3.33),
            _nutrient(1004, "Total lipid (fat)", "g", 3.33),
            _nutrient(1005, "Carbohydrate, by difference", "g", 5.0),
            _nutrient(1253, "Cholesterol", "mg", 12.0),
        ],
        "foodPortions": [
            {
                "amount": 1.0,
                "gramWeight": 248.0,
                "measureUnit": {"name": "cup", "abbreviation": "cup"},
            },
        ],
    },
}

_OFF_PRODUCTS: dict[str, dict[str, object]] = {
    "051500255162": {
        "code": "051500255162",
        "product_name": "Creamy Peanut Butter",
        "brands": "Jif",
        "categories": "Spreads, Nut butters, Peanut butters",
        "categories_tags": ["en:spreads", "en:peanut-butters"],
        "ingredients_text": "Roasted peanuts, sugar, 2% or less of molasses, salt",
        "image_url": "https://images.example.org/051500255162/front.jpg",
        "serving_size": "2 tbsp (32 g)",
        "serving_quantity": "32",
        "nutriments": {
            "energy-kcal_100g": 594.0,
            "proteins_100g": 21.9,
            "fat_100g": 50.0,
            "saturated-fat_100g": 10.9,
            "carbohydrates_100g": 21.9,
            "sugars_100g": 9.4,
            "fiber_100g": 6.2,
            "salt_100g": 1.1,
        },
    },
    "3017620422003": {
        "code": "3017620422003",
        "product_name": "Nutella",
        "brands": "Ferrero",
        "categories": "Sweet spreads, Cocoa and hazelnuts spreads",
        "categories_tags": ["en:sweet-spreads", "en:hazelnut-spreads"],
        "ingredients_text": "Sugar, palm oil, hazelnuts 13%, skimmed milk powder 8.7%",
        "image_small_url": "https://images.example.org/3017620422003/front.200.jpg",
        "serving_size": "15 g",
        "serving_quantity": 15,
        "nutriments": {
            "energy-kj_100g": 2252.0,
            "energy-kcal_100g": 539.0,
            "proteins_100g": 6.3,
            "fat_100g": 30.9,
            "saturated-fat_100g": 10.6,
            "carbohydrates_100g": 57.5,
            "sugars_100g": 56.3,
            "salt_100g": 0.107,
        },
    },
}


_SEARCH_HIT_KEYS = (
    "fdcId",
    "description",
    "dataType",
    "brandOwner",
    "brandName",
    "gtinUpc",
)


def _not_found(url: str, message: str) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(httpx.codes.NOT_FOUND, request=request)
    return httpx.HTTPStatusError(message, request=request, response=response)


@dataclass
class MockFdcClient(FdcClient):
    """FDC client answering from a small built-in catalog."""

    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: copy.deepcopy(_FDC_FOODS)
    )

    async def search_foods(
        self, query: str, page_size: int = 25, page_number: int = 1
    ) -> dict[str, object]:
        """Match the query against descriptions, brands and barcodes."""
        needle = query.strip().lower()
        hits = [
            _search_hit(food)
            for food in self.foods.values()
            if needle in _searchable_text(food)
        ]
        start = (page_number - 1) * page_size
        page = hits[start : start + page_size]
        total_pages = (len(hits) + page_size - 1) // page_size if page_size else 0
        return {
            "totalHits": len(hits),
            "currentPage": page_number,
            "totalPages": total_pages,
            "foods": page,
        }

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        food = self.foods.get(fdc_id)
        if food is None:
            raise _not_found(f"mock://fdc/food/{fdc_id}", f"Food {fdc_id} not found")
        return copy.deepcopy(food)

    async def close(self) -> None:
        return None


@dataclass
class MockOffClient(OffClient):
    """OFF client answering from a small built-in product list."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: copy.deepcopy(_OFF_PRODUCTS)
    )

    async def get_product(self, barcode: str) -> dict[str, object]:
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "code": barcode}
        return {"status": 1, "code": barcode, "product": copy.deepcopy(product)}

    async def close(self) -> None:
        return None


def _searchable_text(food: dict[str, object]) -> str:
    parts = [
        food.get("description"),
        food.get("brandOwner"),
        food.get("brandName"),
        food.get("gtinUpc"),
    ]
    return " ".join(str(part) for part in parts if part).lower()


def _search_hit(food: dict[str, object]) -> dict[str, object]:
    """Reduce a detail payload to the shape of a search result entry."""
    nutrients = []
    for entry in food.get("foodNutrients", []):
        info = entry["nutrient"]
        nutrients.append(
            {
                "nutrientId": info["id"],
                "nutrientName": info["name"],
                "unitName": info["unitName"],
                "value": entry["amount"],
            }
        )
    hit = {key: food[key] for key in _SEARCH_HIT_KEYS if key in food}
    hit["foodNutrients"] = nutrients
    return hit
