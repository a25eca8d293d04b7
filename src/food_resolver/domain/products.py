"""Resolved food product model."""

from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class FoodProduct:
    """Normalized food product produced by a provider parser.

    Nutrient values are scaled to the stated serving. Identity is the barcode:
    two products compare equal when their barcodes match exactly.
    """

    barcode: str
    name: str
    serving_size: float = 100.0
    serving_unit: str = "g"
    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    brand: str | None = None
    image_url: str | None = None
    serving_size_description: str | None = None
    nutrition_grade: str | None = None
    category: str | None = None
    quantity: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FoodProduct):
            return NotImplemented
        return self.barcode == other.barcode

    def __hash__(self) -> int:
        return hash(self.barcode)

    @property
    def display_name(self) -> str:
        """Return the name prefixed with the brand, when there is one."""
        if self.brand:
            return f"{self.brand} - {self.name}"
        return self.name

    @property
    def formatted_serving_size(self) -> str:
        """Return the upstream serving text, or size and unit."""
        if self.serving_size_description is not None:
            return self.serving_size_description
        return f"{int(self.serving_size)}{self.serving_unit}"
