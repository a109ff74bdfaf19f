import logging
from typing import Any, Dict, List, Optional

import requests

from config import DEFAULT_HTTP_TIMEOUT
from constants import PLACEHOLDER_IMAGE_URL, UNKNOWN
from recipe_ids import generate_recipe_id
from recipe_models import Nutrition, RecipeRecord
from recipe_parser import clean_step_prefix, guess_cooking_time, strip_html_tags

SPOONACULAR_API_BASE = "https://api.spoonacular.com/recipes"

NUTRIENT_FIELDS = ("calories", "protein", "fat", "carbohydrates")

logger = logging.getLogger(__name__)


class SpoonacularError(RuntimeError):
    """Raised when the Spoonacular API cannot be reached or refuses a request."""


def _get(path: str, api_key: Optional[str], params: Dict[str, Any], timeout: float) -> Any:
    if not api_key:
        raise SpoonacularError("Spoonacular API key is not configured (SPOONACULAR_API_KEY).")
    url = f"{SPOONACULAR_API_BASE}/{path}"
    logger.info("GET %s %s", url, params)
    try:
        resp = requests.get(url, params={"apiKey": api_key, **params}, timeout=timeout)
    except requests.RequestException as exc:
        raise SpoonacularError(f"Spoonacular request failed: {exc}") from exc
    if not resp.ok:
        logger.warning("Spoonacular API error %s: %s", resp.status_code, resp.text)
        raise SpoonacularError(f"Spoonacular API error {resp.status_code}: {resp.text}")
    try:
        return resp.json()
    except ValueError as exc:
        raise SpoonacularError(f"Spoonacular returned a non-JSON body: {exc}") from exc


def _results(data: Any) -> List[Dict]:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        logger.warning("Invalid response format from Spoonacular: %r", data)
        return []
    return results


def search_recipes(
    api_key: Optional[str],
    query: str,
    diet: Optional[str] = None,
    cuisine: Optional[str] = None,
    max_ready_time: Optional[int] = None,
    number: int = 12,
    timeout: float = DEFAULT_HTTP_TIMEOUT
) -> List[Dict]:
    params: Dict[str, Any] = {
        "query": query,
        "addRecipeInformation": "true",
        "number": str(number),
    }
    if diet:
        params["diet"] = diet
    if cuisine:
        params["cuisine"] = cuisine
    if max_ready_time:
        params["maxReadyTime"] = str(max_ready_time)
    return _results(_get("complexSearch", api_key, params, timeout))


def get_popular_recipes(
    api_key: Optional[str],
    number: int = 6,
    timeout: float = DEFAULT_HTTP_TIMEOUT
) -> List[Dict]:
    params = {
        "number": str(number),
        "sort": "popularity",
        "addRecipeInformation": "true",
    }
    return _results(_get("complexSearch", api_key, params, timeout))


def get_recipe_information(
    api_key: Optional[str],
    recipe_id: Any,
    include_nutrition: bool = True,
    timeout: float = DEFAULT_HTTP_TIMEOUT
) -> Dict:
    params = {"includeNutrition": "true" if include_nutrition else "false"}
    return _get(f"{recipe_id}/information", api_key, params, timeout)


def _instructions(data: Dict) -> List[str]:
    steps: List[str] = []
    for block in data.get("analyzedInstructions") or []:
        for step in block.get("steps") or []:
            text = clean_step_prefix((step.get("step") or "").strip())
            if text:
                steps.append(text)
    if steps:
        return steps
    raw = strip_html_tags(data.get("instructions"))
    return [clean_step_prefix(l.strip()) for l in raw.splitlines() if l.strip()]


def _nutrition(data: Dict) -> Nutrition:
    nutrients = (data.get("nutrition") or {}).get("nutrients") or []
    values: Dict[str, str] = {}
    for nutrient in nutrients:
        key = (nutrient.get("name") or "").lower()
        amount = nutrient.get("amount")
        if key in NUTRIENT_FIELDS and key not in values and amount is not None:
            try:
                values[key] = str(int(round(float(amount))))
            except (TypeError, ValueError):
                logger.warning("Skipping non-numeric %s amount: %r", key, amount)
    return Nutrition(**values)


def _first_lower(values: Any) -> str:
    if values:
        return str(values[0]).strip().lower() or UNKNOWN
    return UNKNOWN


def recipe_record_from_spoonacular(data: Dict) -> RecipeRecord:
    """Map a Spoonacular recipe information payload to a RecipeRecord."""
    instructions = _instructions(data)
    ready = data.get("readyInMinutes")
    if ready:
        cooking_time, cooking_time_value = f"{int(ready)} mins", int(ready)
    else:
        cooking_time, cooking_time_value = guess_cooking_time(instructions)

    return RecipeRecord(
        id=generate_recipe_id("spoonacular", str(data.get("id") or "")),
        title=(data.get("title") or "").strip() or "Untitled Recipe",
        description=strip_html_tags(data.get("summary")).strip(),
        ingredients=[
            ing["original"].strip()
            for ing in data.get("extendedIngredients") or []
            if (ing.get("original") or "").strip()
        ],
        instructions=instructions,
        image_url=data.get("image") or PLACEHOLDER_IMAGE_URL,
        cooking_time=cooking_time,
        cooking_time_value=cooking_time_value,
        cuisine_type=_first_lower(data.get("cuisines")),
        diet_type=_first_lower(data.get("diets")),
        recipe_type="spoonacular",
        nutrition=_nutrition(data),
    )
