import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from constants import (
    BARE_NUMBER_RE,
    BULLET_PREFIX_RE,
    COOKING_TIME_RE,
    CUISINE_RE,
    DIET_RE,
    FIELD_HEADER_RE,
    FIRST_INTEGER_RE,
    HOURS_RE,
    HTML_TAG_RE,
    MEAT_KEYWORDS,
    MINUTES_RE,
    NOTE_LINE_RE,
    NUMBERED_PREFIX_RE,
    NUTRITION_PATTERNS,
    NUTRITION_RE,
    SECTION_BREAK_RE,
    SENTENCE_BREAK_RE,
    STEP_PREFIX_RE,
    UNKNOWN,
)
from recipe_models import Nutrition, RecipeProperties

logger = logging.getLogger(__name__)

MEAT_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(m) for m in sorted(MEAT_KEYWORDS, key=len, reverse=True)) + r")(?:e?s)?\b",
    re.I
)


def normalize_lines(text: str) -> List[str]:
    text = re.sub(r"\r\n?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text).strip()
    return [l.strip() for l in text.split("\n") if l.strip()]


def clean_step_prefix(instruction: str) -> str:
    """Remove "Step 1:", "Step One.", "step 2 -" style prefixes."""
    return STEP_PREFIX_RE.sub("", instruction).strip()


def extract_section(lines: List[str], header: str) -> List[str]:
    """Collect the lines after ``header`` up to the next all-caps label."""
    header = header.upper()
    start = next((i for i, l in enumerate(lines) if l.upper().startswith(header)), None)
    if start is None:
        return []
    section: List[str] = []
    for line in lines[start + 1:]:
        if SECTION_BREAK_RE.match(line):
            break
        if line.strip():
            section.append(line)
    return section


def _first_line(lines: List[str], pattern: re.Pattern) -> Optional[str]:
    return next((l for l in lines if pattern.match(l)), None)


def _label_value(lines: List[str], pattern: re.Pattern) -> str:
    line = _first_line(lines, pattern)
    if line is None:
        return UNKNOWN
    return pattern.sub("", line, count=1).strip().lower() or UNKNOWN


def _quantity(text: str) -> float:
    """Parse 1.5, 1/2 or 1 1/2 as a float."""
    total = 0.0
    for part in text.split():
        if "/" in part:
            num, den = part.split("/")
            total += int(num) / int(den) if int(den) else 0
        else:
            total += float(part)
    return total


def parse_cooking_time_minutes(text: str) -> Optional[int]:
    """Read "45 mins", "1.5 hours" or "1 hour 30 minutes" as whole minutes."""
    if not text:
        return None
    hours = HOURS_RE.search(text)
    # minutes only count after the hours clause ("1 hour 30 mins", not "20 mins to 1 hr")
    minutes = MINUTES_RE.search(text, hours.end()) if hours else MINUTES_RE.search(text)
    if not hours and not minutes:
        return None
    total = 0.0
    if hours:
        total += _quantity(hours.group(1)) * 60
    if minutes:
        total += int(minutes.group(1))
    return int(round(total))


def _cooking_time(lines: List[str]) -> Tuple[str, Optional[int]]:
    line = _first_line(lines, COOKING_TIME_RE)
    if line is None:
        return UNKNOWN, None
    value = COOKING_TIME_RE.sub("", line, count=1)
    if HOURS_RE.search(value):
        minutes = parse_cooking_time_minutes(value)
    else:
        m = FIRST_INTEGER_RE.search(value)
        if not m:
            return UNKNOWN, None
        minutes = int(m.group(1))
    return f"{minutes} mins", minutes


def _nutrition(lines: List[str]) -> Nutrition:
    line = _first_line(lines, NUTRITION_RE)
    if line is None:
        return Nutrition()
    values: Dict[str, str] = {}
    for name, pattern in NUTRITION_PATTERNS.items():
        m = pattern.search(line)
        values[name] = m.group(1) if m else UNKNOWN
    return Nutrition(**values)


def _clean_instruction(line: str) -> str:
    return clean_step_prefix(NUMBERED_PREFIX_RE.sub("", line).strip())


def _is_real_step(line: str) -> bool:
    return bool(line) and not NOTE_LINE_RE.match(line) and not BARE_NUMBER_RE.match(line)


def extract_recipe_properties_from_markdown(text: str) -> RecipeProperties:
    """Turn a labeled recipe blob into RecipeProperties.

    The blob is free text followed by optional ``CUISINE:``, ``DIET:``,
    ``COOKING TIME:``, ``NUTRITION:``, ``INGREDIENTS:`` and ``INSTRUCTIONS:``
    sections. Missing or malformed sections fall back to defaults, so any
    string yields a complete record.
    """
    lines = normalize_lines(text or "")
    if not lines:
        return RecipeProperties()

    first_field = next((i for i, l in enumerate(lines) if FIELD_HEADER_RE.match(l)), None)
    if first_field is None:
        description = " ".join(lines)
    else:
        description = " ".join(lines[:first_field])

    cooking_time, cooking_time_value = _cooking_time(lines)

    ingredients = [BULLET_PREFIX_RE.sub("", l, count=1) for l in extract_section(lines, "INGREDIENTS:")]
    ingredients = [i for i in ingredients if i.strip()]

    instructions = [_clean_instruction(l) for l in extract_section(lines, "INSTRUCTIONS:")]
    instructions = [s for s in instructions if _is_real_step(s)]

    logger.debug(
        "extracted %d ingredients and %d instructions from %d lines",
        len(ingredients), len(instructions), len(lines)
    )
    return RecipeProperties(
        description=description,
        ingredients=ingredients,
        instructions=instructions,
        nutrition=_nutrition(lines),
        cuisine_type=_label_value(lines, CUISINE_RE),
        diet_type=_label_value(lines, DIET_RE),
        cooking_time=cooking_time,
        cooking_time_value=cooking_time_value,
    )


def strip_html_tags(text: Optional[str]) -> str:
    if not text:
        return ""
    return HTML_TAG_RE.sub("", text)


def guess_diet_type(ingredients: Iterable[str], default: str = "omnivore") -> str:
    """Return "vegetarian" unless an ingredient names meat or fish."""
    for ing in ingredients:
        if ing and MEAT_RE.search(ing.strip()):
            return default
    return "vegetarian"


def guess_cooking_time(instructions: List[str]) -> Tuple[str, int]:
    steps = len(instructions)
    if steps <= 3:
        return "15 mins", 15
    if steps <= 6:
        return "30 mins", 30
    return "45 mins", 45


def split_meal_instructions(text: str) -> List[str]:
    # prose instructions: sentence fragments, dropping "Serve." style noise
    parts = [p.strip() for p in SENTENCE_BREAK_RE.split(text or "")]
    return [p for p in parts if len(p) > 10]
