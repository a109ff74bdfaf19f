import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import Settings, load_settings
from constants import FIELD_HEADER_RE, PLACEHOLDER_IMAGE_URL, UNKNOWN, VALID_DIET_TYPES
from recipe_ids import generate_recipe_id
from recipe_models import Nutrition, RecipeRecord
from recipe_parser import (
    clean_step_prefix,
    extract_recipe_properties_from_markdown,
    guess_cooking_time,
    guess_diet_type,
    normalize_lines,
    parse_cooking_time_minutes,
    split_meal_instructions,
)

NUTRITION_KEYS = ("calories", "protein", "fat", "carbohydrates")
MAX_MEAL_INGREDIENTS = 20
FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")
TITLE_LINE_RE = re.compile(r"^(?:#+\s*|TITLE:\s*)", re.I)

SYSTEM_PROMPT = "You are a helpful recipe assistant that generates detailed recipes in JSON format."

logger = logging.getLogger(__name__)


class RecipeGenerationError(RuntimeError):
    """Raised when an AI or meal-database recipe cannot be produced."""


def build_user_prompt(prompt: str) -> str:
    return (
        "Generate a recipe based on the following prompt.\n\n"
        "IMPORTANT: Your response must be a valid JSON object with these exact keys:\n"
        "- title (string): The name of the recipe\n"
        "- description (string): A brief description\n"
        "- ingredients (array of strings): List of ingredients\n"
        "- instructions (array of strings): Step-by-step instructions\n"
        "- cuisine_type (string): One of: italian, mexican, chinese, indian, japanese, thai, "
        "american, mediterranean, french, etc.\n"
        f"- diet_type (string): MUST be one of: {', '.join(VALID_DIET_TYPES)}\n"
        "- cooking_time (string): Format as \"X mins\" or \"X hours\" or \"X hours Y mins\"\n"
        "- nutrition (object): Must include keys 'calories', 'protein', 'fat', 'carbohydrates' "
        "(all as numbers, estimated if necessary)\n\n"
        f"Prompt: {prompt}\n\n"
        "Respond ONLY with the JSON object, no other text."
    )


def _extract_first_json_block(text: str) -> Optional[dict]:
    cleaned = FENCE_RE.sub("", text.strip())
    try:
        data = json.loads(cleaned)
    except ValueError:
        json_match = re.search(r"\{.*\}", cleaned, re.S)
        if not json_match:
            return None
        try:
            data = json.loads(json_match.group(0))
        except ValueError:
            return None
    return data if isinstance(data, dict) else None


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.splitlines()
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def recipe_from_ai_json(data: Dict[str, Any]) -> RecipeRecord:
    """Validate an AI JSON reply and turn it into a RecipeRecord."""
    title = str(data.get("title") or "").strip()
    description = data.get("description")
    ingredients = _string_list(data.get("ingredients"))
    instructions = [clean_step_prefix(s) for s in _string_list(data.get("instructions"))]
    nutrition = data.get("nutrition")
    if not title or not description or not ingredients or not instructions or not isinstance(nutrition, dict):
        raise RecipeGenerationError(f"Missing required fields in AI response: {json.dumps(data)}")
    for key in NUTRITION_KEYS:
        if nutrition.get(key) in (None, ""):
            raise RecipeGenerationError(f"Missing nutrition field: {key} in AI response: {json.dumps(data)}")

    diet_type = str(data.get("diet_type") or "").strip().lower()
    if diet_type not in VALID_DIET_TYPES:
        raise RecipeGenerationError(
            f"Invalid diet type: {data.get('diet_type')}. Must be one of: {', '.join(VALID_DIET_TYPES)}"
        )

    cooking_time = str(data.get("cooking_time") or "")
    minutes = parse_cooking_time_minutes(cooking_time)
    if not minutes:
        raise RecipeGenerationError(
            f"Invalid cooking time format: {cooking_time}. "
            "Must be in format \"X mins\" or \"X hours\" or \"X hours Y mins\""
        )

    return RecipeRecord(
        id=generate_recipe_id("ai"),
        title=title,
        description=str(description).strip(),
        ingredients=ingredients,
        instructions=instructions,
        cooking_time=cooking_time,
        cooking_time_value=minutes,
        cuisine_type=str(data.get("cuisine_type") or UNKNOWN).strip().lower(),
        diet_type=diet_type,
        recipe_type="ai",
        nutrition=Nutrition(**{k: str(nutrition[k]) for k in NUTRITION_KEYS}),
    )


def _split_title(text: str, fallback: str) -> Tuple[str, str]:
    lines = normalize_lines(text)
    if lines and TITLE_LINE_RE.match(lines[0]) and not FIELD_HEADER_RE.match(lines[0]):
        title = TITLE_LINE_RE.sub("", lines[0]).strip()
        return title or fallback, "\n".join(lines[1:])
    return fallback, "\n".join(lines)


def recipe_from_labeled_text(text: str, title: str) -> RecipeRecord:
    """Build a record from a labeled text reply (CUISINE:, INGREDIENTS:, ...)."""
    title, body = _split_title(text, title)
    props = extract_recipe_properties_from_markdown(body)
    if not props.ingredients or not props.instructions:
        raise RecipeGenerationError("AI response has no ingredients or instructions")

    diet_type = props.diet_type
    if diet_type == UNKNOWN:
        diet_type = guess_diet_type(props.ingredients)
    cooking_time, cooking_time_value = props.cooking_time, props.cooking_time_value
    if cooking_time_value is None:
        cooking_time, cooking_time_value = guess_cooking_time(props.instructions)

    return RecipeRecord(
        id=generate_recipe_id("ai"),
        title=title,
        description=props.description,
        ingredients=props.ingredients,
        instructions=props.instructions,
        cooking_time=cooking_time,
        cooking_time_value=cooking_time_value,
        cuisine_type=props.cuisine_type,
        diet_type=diet_type,
        recipe_type="ai",
        nutrition=props.nutrition,
    )


def generate_ai_recipe(
    prompt: str,
    api_url: str,
    model: str,
    api_key: Optional[str] = None,
    timeout: float = 60
) -> RecipeRecord:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(prompt)}
        ]
    }

    logger.info("Requesting AI recipe from %s (model %s)", api_url, model)
    try:
        resp = requests.post(api_url, headers=headers, json=payload, timeout=timeout)
    except requests.RequestException as exc:
        raise RecipeGenerationError(f"Failed to generate recipe from AI: {exc}") from exc
    if not resp.ok:
        logger.warning("AI API error %s: %s", resp.status_code, resp.text)
        raise RecipeGenerationError(f"Failed to generate recipe from AI (HTTP {resp.status_code})")

    try:
        content = resp.json()["choices"][0]["message"]["content"] or ""
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise RecipeGenerationError("Malformed response from AI") from exc
    content = content.strip()
    if not content:
        raise RecipeGenerationError("Empty response from AI")

    data = _extract_first_json_block(content)
    if data is not None:
        return recipe_from_ai_json(data)
    if any(FIELD_HEADER_RE.match(l) for l in normalize_lines(content)):
        logger.info("AI replied with labeled text instead of JSON")
        return recipe_from_labeled_text(content, prompt.strip().capitalize() or "AI Recipe")
    raise RecipeGenerationError(f"Invalid JSON response from AI: {content}")


def fetch_random_meal(api_url: str, timeout: float = 30) -> Dict[str, Any]:
    url = f"{api_url}/random.php"
    logger.info("GET %s", url)
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise RecipeGenerationError(f"Failed to fetch from TheMealDB: {exc}") from exc
    if not resp.ok:
        raise RecipeGenerationError(f"Failed to fetch from TheMealDB (HTTP {resp.status_code})")
    try:
        data = resp.json()
    except ValueError as exc:
        raise RecipeGenerationError(f"TheMealDB returned a non-JSON body: {exc}") from exc
    meals = data.get("meals") if isinstance(data, dict) else None
    if not meals:
        raise RecipeGenerationError("No meal data received")
    return meals[0]


def meal_ingredients(meal: Dict[str, Any]) -> List[str]:
    ingredients: List[str] = []
    for i in range(1, MAX_MEAL_INGREDIENTS + 1):
        ingredient = (meal.get(f"strIngredient{i}") or "").strip()
        measure = (meal.get(f"strMeasure{i}") or "").strip()
        if ingredient:
            ingredients.append(f"{measure} {ingredient}".strip())
    return ingredients


def recipe_from_meal(meal: Dict[str, Any]) -> RecipeRecord:
    name = (meal.get("strMeal") or "").strip() or "Delicious Recipe"
    area = (meal.get("strArea") or "").strip()
    category = (meal.get("strCategory") or "").strip()

    ingredients = meal_ingredients(meal)
    instructions = split_meal_instructions(meal.get("strInstructions") or "")
    if not instructions:
        instructions = ["Mix all ingredients together.", "Cook until done.", "Serve hot."]
    cooking_time, cooking_time_value = guess_cooking_time(instructions)

    recipe_kind = f"This {category.lower()} recipe" if category else "This recipe"
    description = (
        f"{name} is a delicious {area or 'international'} dish. {recipe_kind} features fresh "
        "ingredients and traditional cooking methods to create a flavorful and satisfying meal."
    )

    return RecipeRecord(
        id=generate_recipe_id("ai", meal.get("idMeal")),
        title=name,
        description=description,
        ingredients=ingredients,
        instructions=instructions,
        image_url=meal.get("strMealThumb") or PLACEHOLDER_IMAGE_URL,
        cooking_time=cooking_time,
        cooking_time_value=cooking_time_value,
        cuisine_type=area.lower() or "international",
        diet_type=guess_diet_type(ingredients),
        recipe_type="ai",
    )


class RecipeGenerator:
    """Service producing AI recipe records from prompts or the meal database."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()

    def from_prompt(self, prompt: str) -> RecipeRecord:
        if not prompt or not prompt.strip():
            raise RecipeGenerationError("Prompt is required")
        return generate_ai_recipe(
            prompt,
            api_url=self.settings.ai_api_url,
            model=self.settings.ai_model,
            api_key=self.settings.ai_api_key,
            timeout=max(self.settings.http_timeout, 60)
        )

    def from_meal_database(self) -> RecipeRecord:
        meal = fetch_random_meal(self.settings.mealdb_api_url, timeout=self.settings.http_timeout)
        return recipe_from_meal(meal)
