import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from config import load_settings
from constants import UNKNOWN
from recipe_generator import RecipeGenerationError, RecipeGenerator
from recipe_models import RecipeProperties
from recipe_parser import extract_recipe_properties_from_markdown
from recipe_records import RecipeRecordBuilder
from spoonacular_client import SpoonacularError, search_recipes

logger = logging.getLogger(__name__)


def render_recipe_text(properties: RecipeProperties) -> str:
    """Render properties back into the labeled text format the extractor reads."""
    lines: List[str] = []
    if properties.description:
        lines.append(properties.description)
        lines.append("")
    if properties.cuisine_type != UNKNOWN:
        lines.append(f"CUISINE: {properties.cuisine_type}")
    if properties.diet_type != UNKNOWN:
        lines.append(f"DIET: {properties.diet_type}")
    if properties.cooking_time_value is not None:
        lines.append(f"COOKING TIME: {properties.cooking_time_value} mins")

    n = properties.nutrition
    clauses = [
        f"{n.calories} calories" if n.calories != UNKNOWN else "",
        f"{n.protein}g protein" if n.protein != UNKNOWN else "",
        f"{n.fat}g fat" if n.fat != UNKNOWN else "",
        f"{n.carbohydrates}g carbohydrates" if n.carbohydrates != UNKNOWN else "",
    ]
    clauses = [c for c in clauses if c]
    if clauses:
        lines.append("NUTRITION: " + ", ".join(clauses))

    if properties.ingredients:
        lines.append("")
        lines.append("INGREDIENTS:")
        lines.extend(f"- {ing}" for ing in properties.ingredients)
    if properties.instructions:
        lines.append("")
        lines.append("INSTRUCTIONS:")
        lines.extend(f"{i}. {step}" for i, step in enumerate(properties.instructions, 1))
    return "\n".join(lines).strip() + "\n"


def _read_input(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(content: str, out: Optional[str]) -> None:
    if not out:
        sys.stdout.write(content)
        return
    out_path = Path(out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", out_path)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def cmd_parse(args: argparse.Namespace) -> str:
    properties = extract_recipe_properties_from_markdown(_read_input(args.file))
    if args.markdown:
        return render_recipe_text(properties)
    if args.title:
        record = RecipeRecordBuilder().build(args.title, properties, guess_missing_time=args.guess_time)
        return _dump(record.to_row())
    return _dump(properties.to_dict())


def cmd_generate(args: argparse.Namespace) -> str:
    settings = load_settings()
    if args.model:
        settings.ai_model = args.model
    return _dump(RecipeGenerator(settings).from_prompt(args.prompt).to_row())


def cmd_random_meal(args: argparse.Namespace) -> str:
    return _dump(RecipeGenerator(load_settings()).from_meal_database().to_row())


def cmd_search(args: argparse.Namespace) -> str:
    settings = load_settings()
    results = search_recipes(
        args.api_key or settings.spoonacular_api_key,
        args.query,
        diet=args.diet,
        cuisine=args.cuisine,
        max_ready_time=args.max_ready_time,
        number=args.number,
        timeout=settings.http_timeout
    )
    return _dump(results)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="recipe-markdown",
        description="Turn labeled recipe text into structured recipe records."
    )
    ap.add_argument("--out", help="Write the result to this file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Extract recipe properties from a text file (or stdin)")
    p.add_argument("file", nargs="?", help="Input file, '-' or omitted for stdin")
    p.add_argument("--markdown", action="store_true", help="Print the labeled text form instead of JSON")
    p.add_argument("--title", help="Emit a full recipe row with this title")
    p.add_argument("--guess-time", action="store_true", help="Estimate a missing cooking time from the step count")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("generate", help="Generate a recipe with the AI chat endpoint")
    p.add_argument("prompt", help="What to cook")
    p.add_argument("--model", help="Override AI_MODEL")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("random-meal", help="Build a recipe from a random TheMealDB meal")
    p.set_defaults(func=cmd_random_meal)

    p = sub.add_parser("search", help="Search Spoonacular recipes")
    p.add_argument("query")
    p.add_argument("--diet")
    p.add_argument("--cuisine")
    p.add_argument("--max-ready-time", type=int)
    p.add_argument("--number", type=int, default=12)
    p.add_argument("--api-key", help="Override SPOONACULAR_API_KEY")
    p.set_defaults(func=cmd_search)
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    try:
        _write_output(args.func(args), args.out)
    except (RecipeGenerationError, SpoonacularError) as exc:
        raise SystemExit(str(exc))
    except OSError as exc:
        raise SystemExit(f"Cannot read or write file: {exc}")


if __name__ == "__main__":
    main()
