"""Parsers turning upstream payloads into food products."""

import math
import string
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from food_resolver.domain.errors import (
    DecodingError,
    InvalidResponseError,
    ProductNotFoundError,
)
from food_resolver.domain.products import FoodProduct
from food_resolver.domain.provider_models import (
    FdcFood,
    FdcSearchResponse,
    OffNutriments,
    OffProduct,
    OffProductResponse,
    OffSearchResponse,
)
from food_resolver.services.serving_size import DEFAULT_SERVING, parse_serving_size

# FDC nutrient id -> product field. Sodium (1093) is reported in mg.
GENERIC_NUTRIENT_FIELDS: dict[int, str] = {
    1008: "calories",
    1003: "protein",
    1005: "carbs",
    1004: "fat",
    1079: "fiber",
    2000: "sugar",
    1093: "sodium",
}

GENERIC_BARCODE_PREFIX = "usda-"
KJ_PER_KCAL = 4.184
UNKNOWN_PRODUCT_NAME = "Unknown Product"

_GENERIC_NAME_QUALIFIERS = (", Raw", ", Nfs")
_FDC_UNITS = {"grm": "g", "g": "g", "mlt": "ml", "ml": "ml"}

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def parse_generic_foods(payload: object) -> list[FoodProduct]:
    """Parse an FDC search payload into products."""
    response = _validate(FdcSearchResponse, payload)
    products: list[FoodProduct] = []
    for food in response.foods:
        product = _generic_product(food)
        if product is not None:
            products.append(product)
    return products


def parse_branded_product(payload: object, barcode: str) -> FoodProduct:
    """Parse an Open Food Facts product payload for the requested barcode."""
    response = _validate(OffProductResponse, payload)
    if response.status != 1 or response.product is None:
        raise ProductNotFoundError()
    name = (response.product.product_name or "").strip() or UNKNOWN_PRODUCT_NAME
    return _branded_product(response.product, barcode=barcode, name=name)


def parse_branded_search(payload: object) -> list[FoodProduct]:
    """Parse an Open Food Facts search payload, skipping unnamed items."""
    response = _validate(OffSearchResponse, payload)
    products: list[FoodProduct] = []
    for item in response.products:
        name = (item.product_name or "").strip()
        if not item.code or not name:
            continue
        products.append(_branded_product(item, barcode=item.code, name=name))
    return products


def clean_generic_name(description: str) -> str:
    """Capitalize words and drop FDC qualifiers such as ", Raw"."""
    name = string.capwords(description)
    for qualifier in _GENERIC_NAME_QUALIFIERS:
        name = name.replace(qualifier, "")
    return name.strip()


def _validate(model: type[_ModelT], payload: object) -> _ModelT:
    if not isinstance(payload, dict):
        raise InvalidResponseError()
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodingError(exc) from exc


def _generic_product(food: FdcFood) -> FoodProduct | None:
    name = clean_generic_name(food.description)
    if not name:
        return None

    values = dict.fromkeys(GENERIC_NUTRIENT_FIELDS.values(), 0.0)
    for nutrient in food.food_nutrients:
        field = GENERIC_NUTRIENT_FIELDS.get(nutrient.resolved_id)
        amount = nutrient.resolved_value
        if field is None or amount is None:
            continue
        values[field] = max(amount, 0.0)

    serving_size, serving_unit = DEFAULT_SERVING
    if food.serving_size and food.serving_size > 0:
        serving_size = food.serving_size
        if food.serving_size_unit:
            unit = food.serving_size_unit.strip().lower()
            serving_unit = _FDC_UNITS.get(unit, unit)

    return FoodProduct(
        barcode=f"{GENERIC_BARCODE_PREFIX}{food.fdc_id}",
        name=name,
        brand=food.brand_name or food.brand_owner,
        serving_size=serving_size,
        serving_unit=serving_unit,
        serving_size_description=food.household_serving_text,
        calories=round(values["calories"]),
        protein=values["protein"],
        carbs=values["carbs"],
        fat=values["fat"],
        fiber=values["fiber"],
        sugar=values["sugar"],
        sodium=values["sodium"],
    )


def _branded_product(product: OffProduct, *, barcode: str, name: str) -> FoodProduct:
    serving_size, serving_unit = parse_serving_size(product.serving_size)
    nutriments = product.nutriments or OffNutriments()
    scale = serving_size / 100

    sodium_per_serving_g = (nutriments.sodium_100g or 0.0) * scale
    return FoodProduct(
        barcode=barcode,
        name=name,
        brand=product.brands or None,
        image_url=product.image_front_url or product.image_url,
        serving_size=serving_size,
        serving_unit=serving_unit,
        serving_size_description=product.serving_size,
        calories=_branded_calories(nutriments, scale),
        protein=_per_serving(
            nutriments.proteins_serving, nutriments.proteins_100g, scale
        ),
        carbs=_per_serving(
            nutriments.carbohydrates_serving, nutriments.carbohydrates_100g, scale
        ),
        fat=_per_serving(nutriments.fat_serving, nutriments.fat_100g, scale),
        fiber=_per_serving(nutriments.fiber_serving, nutriments.fiber_100g, scale),
        sugar=_per_serving(nutriments.sugars_serving, nutriments.sugars_100g, scale),
        sodium=_finite(max(sodium_per_serving_g * 1000, 0.0), "sodium"),
        nutrition_grade=product.nutrition_grades,
        category=_first_category(product.categories),
        quantity=product.quantity,
    )


def _per_serving(
    per_serving: float | None, per_100g: float | None, scale: float
) -> float:
    if per_serving is not None:
        return max(per_serving, 0.0)
    return _finite(max((per_100g or 0.0) * scale, 0.0), "nutrient")


def _branded_calories(nutriments: OffNutriments, scale: float) -> int:
    if nutriments.energy_kcal_serving is not None:
        kcal = nutriments.energy_kcal_serving
    elif nutriments.energy_kcal_100g is not None:
        kcal = nutriments.energy_kcal_100g * scale
    elif nutriments.energy_100g is not None:
        kcal = nutriments.energy_100g / KJ_PER_KCAL * scale
    else:
        kcal = 0.0
    return max(round(_finite(kcal, "calories")), 0)


def _finite(value: float, field: str) -> float:
    # Finite inputs can still overflow once scaled to the serving.
    if not math.isfinite(value):
        raise DecodingError(ValueError(f"{field} is out of range"))
    return value


def _first_category(categories: str | None) -> str | None:
    if not categories:
        return None
    first = categories.split(",")[0].strip()
    return first or None
