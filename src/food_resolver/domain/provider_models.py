"""Pydantic models for upstream food database payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _ProviderModel(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, allow_inf_nan=False)


class FdcNutrientInfo(_ProviderModel):
    """Nested nutrient descriptor used by FDC detail payloads."""

    id: int | None = None
    name: str | None = None


class FdcFoodNutrient(_ProviderModel):
    """FDC nutrient entry in either the search or the detail shape."""

    nutrient_id: int | None = Field(default=None, alias="nutrientId")
    value: float | None = None
    amount: float | None = None
    nutrient: FdcNutrientInfo | None = None

    @property
    def resolved_id(self) -> int | None:
        if self.nutrient_id is not None:
            return self.nutrient_id
        if self.nutrient is not None:
            return self.nutrient.id
        return None

    @property
    def resolved_value(self) -> float | None:
        return self.value if self.value is not None else self.amount


class FdcFood(_ProviderModel):
    """FDC food record."""

    fdc_id: int = Field(alias="fdcId")
    description: str
    brand_name: str | None = Field(default=None, alias="brandName")
    brand_owner: str | None = Field(default=None, alias="brandOwner")
    food_nutrients: list[FdcFoodNutrient] = Field(
        default_factory=list, alias="foodNutrients"
    )
    serving_size: float | None = Field(default=None, alias="servingSize")
    serving_size_unit: str | None = Field(default=None, alias="servingSizeUnit")
    household_serving_text: str | None = Field(
        default=None, alias="householdServingFullText"
    )


class FdcSearchResponse(_ProviderModel):
    """FDC foods/search payload."""

    foods: list[FdcFood] = Field(default_factory=list)


class OffNutriments(_ProviderModel):
    """Open Food Facts nutriments block (per 100g and per serving)."""

    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    energy_100g: float | None = None
    proteins_100g: float | None = None
    carbohydrates_100g: float | None = None
    fat_100g: float | None = None
    fiber_100g: float | None = None
    sugars_100g: float | None = None
    sodium_100g: float | None = None

    energy_kcal_serving: float | None = Field(
        default=None, alias="energy-kcal_serving"
    )
    proteins_serving: float | None = None
    carbohydrates_serving: float | None = None
    fat_serving: float | None = None
    fiber_serving: float | None = None
    sugars_serving: float | None = None


class OffProduct(_ProviderModel):
    """Open Food Facts product record."""

    code: str | None = None
    product_name: str | None = None
    brands: str | None = None
    image_url: str | None = None
    image_front_url: str | None = None
    serving_size: str | None = None
    nutriments: OffNutriments | None = None
    nutrition_grades: str | None = None
    categories: str | None = None
    quantity: str | None = None


class OffProductResponse(_ProviderModel):
    """Open Food Facts product lookup payload."""

    status: int
    product: OffProduct | None = None


class OffSearchResponse(_ProviderModel):
    """Open Food Facts search payload."""

    products: list[OffProduct] = Field(default_factory=list)
