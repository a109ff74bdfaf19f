import re
import uuid
from dataclasses import dataclass
from typing import Optional

RECIPE_SOURCES = ("user", "spoonacular", "ai")

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)


@dataclass(frozen=True)
class RecipeIdInfo:
    id: str
    source: str = "user"


def generate_recipe_id(source: str, original_id: Optional[str] = None) -> str:
    """Return a fresh id for a recipe from ``source``.

    Every stored recipe gets its own UUID, so ``original_id`` (a Spoonacular
    or meal-database id) is not encoded in the result.
    """
    if source not in RECIPE_SOURCES:
        raise ValueError(f"Unknown recipe source: {source!r}")
    return str(uuid.uuid4())


def is_valid_recipe_id(value: Optional[str]) -> bool:
    return bool(value) and bool(UUID_RE.match(value))


def parse_recipe_id(value: str) -> RecipeIdInfo:
    value = value.strip()
    if value.isdigit():
        return RecipeIdInfo(id=value, source="spoonacular")
    return RecipeIdInfo(id=value)
