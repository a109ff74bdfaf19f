from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from constants import PLACEHOLDER_IMAGE_URL, SYSTEM_USER_ID, UNKNOWN


@dataclass(frozen=True)
class Nutrition:
    """Per-serving nutrition values as numeric strings or "unknown"."""

    calories: str = UNKNOWN
    protein: str = UNKNOWN
    fat: str = UNKNOWN
    carbohydrates: str = UNKNOWN


@dataclass(frozen=True)
class RecipeProperties:
    """Structured fields extracted from a labeled recipe text blob."""

    description: str = ""
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    nutrition: Nutrition = field(default_factory=Nutrition)
    cuisine_type: str = UNKNOWN
    diet_type: str = UNKNOWN
    cooking_time: str = UNKNOWN
    cooking_time_value: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecipeRecord:
    """A recipe row ready to be stored by the caller."""

    id: str
    title: str
    description: str
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    image_url: str = PLACEHOLDER_IMAGE_URL
    cooking_time: str = UNKNOWN
    cooking_time_value: Optional[int] = None
    cooking_time_unit: str = "mins"
    user_id: str = SYSTEM_USER_ID
    cuisine_type: str = UNKNOWN
    diet_type: str = UNKNOWN
    recipe_type: str = "user"
    nutrition: Nutrition = field(default_factory=Nutrition)

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row.update(row.pop("nutrition"))
        return row
