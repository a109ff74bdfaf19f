from itertools import permutations

from recipe_models import Nutrition, RecipeProperties
from recipe_parser import (
    clean_step_prefix,
    extract_recipe_properties_from_markdown,
    extract_section,
    guess_cooking_time,
    guess_diet_type,
    normalize_lines,
    parse_cooking_time_minutes,
    split_meal_instructions,
    strip_html_tags,
)

FULL_RECIPE = """
A hearty tomato soup.
Great for cold evenings.

CUISINE: Italian
DIET: Vegetarian
COOKING TIME: 45 minutes
NUTRITION: 400 calories, 30g protein, 10g fat, 50g carbohydrates

INGREDIENTS:
- 4 tomatoes
* 1 onion
- salt

INSTRUCTIONS:
1. Step 1: Chop the tomatoes
2. Step Two. Fry the onion
3. Simmer everything for 30 minutes
Notes
4
"""


def test_extract_full_recipe():
    props = extract_recipe_properties_from_markdown(FULL_RECIPE)

    assert props.description == "A hearty tomato soup. Great for cold evenings."
    assert props.cuisine_type == "italian"
    assert props.diet_type == "vegetarian"
    assert props.cooking_time == "45 mins"
    assert props.cooking_time_value == 45
    assert props.nutrition == Nutrition(calories="400", protein="30", fat="10", carbohydrates="50")
    assert props.ingredients == ["4 tomatoes", "1 onion", "salt"]
    assert props.instructions == [
        "Chop the tomatoes",
        "Fry the onion",
        "Simmer everything for 30 minutes",
    ]


def test_empty_input_returns_defaults():
    props = extract_recipe_properties_from_markdown("")

    assert props == RecipeProperties()
    assert props.description == ""
    assert props.ingredients == []
    assert props.instructions == []
    assert props.cuisine_type == "unknown"
    assert props.diet_type == "unknown"
    assert props.cooking_time == "unknown"
    assert props.cooking_time_value is None
    assert props.nutrition == Nutrition("unknown", "unknown", "unknown", "unknown")


def test_whitespace_only_input_returns_defaults():
    assert extract_recipe_properties_from_markdown("\r\n   \n\n\n\t\n") == RecipeProperties()


def test_every_field_is_present_in_dict_form():
    data = extract_recipe_properties_from_markdown("just some text").to_dict()

    assert set(data) == {
        "description", "ingredients", "instructions", "nutrition",
        "cuisine_type", "diet_type", "cooking_time", "cooking_time_value",
    }
    assert set(data["nutrition"]) == {"calories", "protein", "fat", "carbohydrates"}
    assert data["ingredients"] == [] and data["instructions"] == []


def test_cooking_time_in_hours_is_converted_to_minutes():
    props = extract_recipe_properties_from_markdown("COOKING TIME: 2 hours")

    assert props.cooking_time_value == 120
    assert props.cooking_time == "120 mins"


def test_cooking_time_uses_first_integer_without_hours():
    props = extract_recipe_properties_from_markdown("cooking time: about 30-40 min")

    assert props.cooking_time_value == 30
    assert props.cooking_time == "30 mins"


def test_cooking_time_without_number_stays_unknown():
    props = extract_recipe_properties_from_markdown("COOKING TIME: a while")

    assert props.cooking_time == "unknown"
    assert props.cooking_time_value is None


def test_nutrition_clauses_in_any_order():
    clauses = ["400 calories", "30g protein", "10g fat", "50g carbohydrates"]
    expected = Nutrition(calories="400", protein="30", fat="10", carbohydrates="50")

    for order in permutations(clauses):
        props = extract_recipe_properties_from_markdown("NUTRITION: " + ", ".join(order))
        assert props.nutrition == expected, order


def test_partial_nutrition_leaves_unknowns():
    props = extract_recipe_properties_from_markdown("NUTRITION: 350 kcal, 12g fat")

    assert props.nutrition == Nutrition(calories="350", fat="12")
    assert props.nutrition.protein == "unknown"
    assert props.nutrition.carbohydrates == "unknown"


def test_ingredient_bullets_are_stripped_in_order():
    props = extract_recipe_properties_from_markdown("INGREDIENTS:\n- egg\n* milk")

    assert props.ingredients == ["egg", "milk"]


def test_numbered_and_step_prefixes_are_stripped():
    props = extract_recipe_properties_from_markdown(
        "INSTRUCTIONS:\n1. Step 1: Preheat oven\n2. Mix ingredients"
    )

    assert props.instructions == ["Preheat oven", "Mix ingredients"]


def test_note_and_number_lines_are_dropped_from_instructions():
    props = extract_recipe_properties_from_markdown(
        "INSTRUCTIONS:\nBake the bread\nNotes\n3\nTip\nLet it cool"
    )

    assert props.instructions == ["Bake the bread", "Let it cool"]


def test_list_section_stops_at_next_all_caps_label():
    text = "INGREDIENTS:\n- flour\n- water\nINSTRUCTIONS:\nKnead\nCUISINE: french"
    props = extract_recipe_properties_from_markdown(text)

    assert props.ingredients == ["flour", "water"]
    assert props.instructions == ["Knead"]
    assert props.cuisine_type == "french"


def test_all_caps_ingredient_truncates_section():
    props = extract_recipe_properties_from_markdown("INGREDIENTS:\n- flour\nSALT: to taste\n- water")

    assert props.ingredients == ["flour"]


def test_header_detection_is_case_insensitive():
    props = extract_recipe_properties_from_markdown(
        "Quick lunch\nCuisine: Mexican\ndiet: Vegan\ningredients:\n- beans"
    )

    assert props.description == "Quick lunch"
    assert props.cuisine_type == "mexican"
    assert props.diet_type == "vegan"
    assert props.ingredients == ["beans"]


def test_description_is_empty_when_text_starts_with_header():
    props = extract_recipe_properties_from_markdown("CUISINE: thai\nSpicy noodles")

    assert props.description == ""
    assert props.cuisine_type == "thai"


def test_text_without_headers_is_all_description():
    props = extract_recipe_properties_from_markdown("Line one\r\n\r\n\r\n\r\nLine two\rLine three")

    assert props.description == "Line one Line two Line three"
    assert props.ingredients == []


def test_extracting_description_again_is_stable():
    first = extract_recipe_properties_from_markdown(FULL_RECIPE)
    second = extract_recipe_properties_from_markdown(first.description)

    assert second == RecipeProperties(description=first.description)


def test_normalize_lines_trims_and_drops_blanks():
    assert normalize_lines("  a  \r\n\r\n\r\n\r\n b\r\n\t\n") == ["a", "b"]


def test_extract_section_missing_header_returns_empty():
    assert extract_section(["foo", "bar"], "INGREDIENTS:") == []


def test_clean_step_prefix_variants():
    assert clean_step_prefix("Step 1: Boil water") == "Boil water"
    assert clean_step_prefix("step three - Drain") == "Drain"
    assert clean_step_prefix("STEP 10. Serve") == "Serve"
    assert clean_step_prefix("Stepping stones") == "Stepping stones"


def test_parse_cooking_time_minutes():
    assert parse_cooking_time_minutes("45 mins") == 45
    assert parse_cooking_time_minutes("1 hour") == 60
    assert parse_cooking_time_minutes("1.5 hours") == 90
    assert parse_cooking_time_minutes("1 hour 30 mins") == 90
    assert parse_cooking_time_minutes("soon") is None
    assert parse_cooking_time_minutes("") is None


def test_strip_html_tags():
    assert strip_html_tags("<b>Rich</b> and <a href='x'>tasty</a>") == "Rich and tasty"
    assert strip_html_tags(None) == ""


def test_guess_diet_type():
    assert guess_diet_type(["2 eggs", "1 cup milk", "peeled carrots"]) == "vegetarian"
    assert guess_diet_type(["500g Chicken thighs", "rice"]) == "omnivore"
    assert guess_diet_type(["anchovies"], default="unknown") == "unknown"


def test_guess_cooking_time_by_step_count():
    assert guess_cooking_time(["a"] * 3) == ("15 mins", 15)
    assert guess_cooking_time(["a"] * 6) == ("30 mins", 30)
    assert guess_cooking_time(["a"] * 7) == ("45 mins", 45)


def test_split_meal_instructions_drops_short_fragments():
    text = "Heat the oil in a large pan. Add onions and fry until soft. Serve."
    assert split_meal_instructions(text) == [
        "Heat the oil in a large pan",
        "Add onions and fry until soft",
    ]


def test_multi_word_header_does_not_end_list_section():
    props = extract_recipe_properties_from_markdown("INGREDIENTS:\n- egg\nCOOKING TIME: 5 mins")

    assert props.ingredients == ["egg", "COOKING TIME: 5 mins"]
    assert props.cooking_time_value == 5


def test_minutes_before_hours_are_not_added():
    assert parse_cooking_time_minutes("20 mins to 1 hr") == 60
    props = extract_recipe_properties_from_markdown("COOKING TIME: 20 mins to 1 hr")
    assert (props.cooking_time, props.cooking_time_value) == ("60 mins", 60)


def test_fractional_hours():
    assert parse_cooking_time_minutes("1 1/2 hours") == 90
    assert parse_cooking_time_minutes("1/2 hour") == 30
    assert extract_recipe_properties_from_markdown("COOKING TIME: 2 1/2 hrs").cooking_time_value == 150


def test_empty_label_values_stay_unknown():
    props = extract_recipe_properties_from_markdown("Soup\nCUISINE:\nDIET:   ")

    assert props.cuisine_type == "unknown"
    assert props.diet_type == "unknown"
