from typing import Optional

from constants import PLACEHOLDER_IMAGE_URL, SYSTEM_USER_ID, UNKNOWN
from recipe_ids import generate_recipe_id
from recipe_models import RecipeProperties, RecipeRecord
from recipe_parser import guess_cooking_time


def format_cooking_time(minutes: Optional[int]) -> str:
    return f"{minutes} mins" if minutes is not None else UNKNOWN


class RecipeRecordBuilder:
    """Turns extracted RecipeProperties into a storable RecipeRecord."""

    def __init__(self, user_id: str = SYSTEM_USER_ID, recipe_type: str = "user"):
        self.user_id = user_id
        self.recipe_type = recipe_type

    def build(
        self,
        title: str,
        properties: RecipeProperties,
        image_url: Optional[str] = None,
        guess_missing_time: bool = False
    ) -> RecipeRecord:
        minutes = properties.cooking_time_value
        cooking_time = format_cooking_time(minutes)
        if minutes is None and guess_missing_time and properties.instructions:
            cooking_time, minutes = guess_cooking_time(properties.instructions)

        return RecipeRecord(
            id=generate_recipe_id(self.recipe_type),
            title=title.strip() or "Untitled Recipe",
            description=properties.description,
            ingredients=list(properties.ingredients),
            instructions=list(properties.instructions),
            image_url=image_url or PLACEHOLDER_IMAGE_URL,
            cooking_time=cooking_time,
            cooking_time_value=minutes,
            user_id=self.user_id,
            cuisine_type=properties.cuisine_type,
            diet_type=properties.diet_type,
            recipe_type=self.recipe_type,
            nutrition=properties.nutrition,
        )
