"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field

import httpx
import pytest

from food_catalog.adapters.fdc_client import FdcClient
from food_catalog.adapters.in_memory_repositories import (
    InMemoryFoodLogRepository,
    InMemoryFoodRefRepository,
)
from food_catalog.adapters.off_client import OffClient
from food_catalog.config import Settings
from food_catalog.containers import AppContainer
from food_catalog.services.cache import ResultCache
from food_catalog.services.catalog import FoodCatalogService
from food_catalog.services.food_log import FoodLogService
from food_catalog.services.food_refs import FoodRefService
from food_catalog.services.generations import RequestGeneration


def fdc_nutrient(nutrient_id: int, name: str, unit: str, amount: float) -> dict:
    return {
        "nutrient": {"id": nutrient_id, "name": name, "unitName": unit},
        "amount": amount,
    }


def peanut_butter_fdc_payload() -> dict[str, object]:
    return {
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
        "foodNutrients": [
            fdc_nutrient(1008, "Energy", "kcal", 600.0),
            fdc_nutrient(1003, "Protein", "g", 22.0),
            fdc_nutrient(1004, "Total lipid (fat)", "g", 50.0),
            fdc_nutrient(1005, "Carbohydrate, by difference", "g", 20.0),
            fdc_nutrient(1093, "Sodium, Na", "mg", 400.0),
        ],
        "labelNutrients": {
            "calories": {"value": 192.0},
            "sugars": {"value": 3.2},
        },
    }


def peanut_butter_off_product() -> dict[str, object]:
    return {
        "code": "051500255162",
        "product_name": "Peanut butter creamy",
        "brands": "Jif",
        "ingredients_text": "Roasted peanuts, sugar, molasses, salt",
        "image_url": "https://images.example.org/051500255162/front.jpg",
        "serving_size": "2 tbsp (32 g)",
        "serving_quantity": "32",
        "nutriments": {
            "energy-kcal_100g": 590.0,
            "proteins_100g": 21.0,
            "fat_100g": 49.0,
            "fiber_100g": 6.0,
            "salt_100g": 1.0,
        },
    }


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: {2257046: peanut_butter_fdc_payload()}
    )
    search_calls: list[tuple[str, int, int]] = field(default_factory=list)
    food_calls: list[int] = field(default_factory=list)
    closed: bool = False

    async def search_foods(
        self, query: str, page_size: int = 25, page_number: int = 1
    ) -> dict[str, object]:
        self.search_calls.append((query, page_size, page_number))
        needle = query.lower()
        hits = []
        for food in self.foods.values():
            text = f"{food.get('description', '')} {food.get('gtinUpc', '')}".lower()
            if needle in text:
                hits.append(
                    {
                        "fdcId": food["fdcId"],
                        "description": food.get("description"),
                        "dataType": food.get("dataType"),
                        "brandOwner": food.get("brandOwner"),
                        "brandName": food.get("brandName"),
                        "gtinUpc": food.get("gtinUpc"),
                        "foodNutrients": food.get("foodNutrients", []),
                    }
                )
        return {"foods": hits}

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls.append(fdc_id)
        if fdc_id not in self.foods:
            request = httpx.Request("GET", f"https://fdc.test/food/{fdc_id}")
            response = httpx.Response(404, request=request)
            raise httpx.HTTPStatusError(
                "Not Found", request=request, response=response
            )
        return copy.deepcopy(self.foods[fdc_id])

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeOffClient(OffClient):
    """Fake OFF client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {"051500255162": peanut_butter_off_product()}
    )
    closed: bool = False

    async def get_product(self, barcode: str) -> dict[str, object]:
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "code": barcode}
        return {"status": 1, "code": barcode, "product": copy.deepcopy(product)}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        use_mock_data=False,
        supabase_url=None,
        supabase_service_key=None,
    )


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def off_client() -> FakeOffClient:
    return FakeOffClient()


@pytest.fixture
def food_ref_repository() -> InMemoryFoodRefRepository:
    return InMemoryFoodRefRepository()


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def catalog_service(
    fdc_client: FakeFdcClient, off_client: FakeOffClient
) -> FoodCatalogService:
    return FoodCatalogService(
        fdc_client=fdc_client,
        off_client=off_client,
        retry_delay_seconds=0,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    fdc_client: FakeFdcClient,
    off_client: FakeOffClient,
    food_ref_repository: InMemoryFoodRefRepository,
    food_log_repository: InMemoryFoodLogRepository,
    catalog_service: FoodCatalogService,
) -> AppContainer:
    async def close_resources() -> None:
        await fdc_client.close()
        await off_client.close()

    return AppContainer(
        settings=settings,
        fdc_client=fdc_client,
        off_client=off_client,
        cache=ResultCache(),
        catalog_service=catalog_service,
        food_ref_service=FoodRefService(food_ref_repository),
        food_log_service=FoodLogService(
            food_refs=food_ref_repository, repository=food_log_repository
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def generation() -> RequestGeneration:
    return RequestGeneration()
