#!/usr/bin/env python3
"""Ad hoc query runner for the Recipe Generator.

Runs one generation against the live Gemini API and prints the recipe.

Usage:
    python query.py "I have eggs, spinach and avocado"
    python query.py --diet vegetarian "High protein lunch with lentils"
    python query.py --meal breakfast "Oats and blueberries"
    python query.py --debug "Your query"  # Show full JSON recipe
"""

import asyncio
import sys
from datetime import datetime
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown

from src.models.models import HistoryEntry, Recipe, SessionStatus
from src.session.controller import initialize_recipe_session
from src.session.history import format_relative_time
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--diet DIET] [--meal MEAL_TYPE] "<your query>"'


def recipe_to_markdown(recipe: Recipe) -> str:
    """Render a recipe as markdown for terminal output."""
    macros = recipe.macros
    lines = [
        f"# {recipe.name}",
        "",
        f"**Protein** {macros.protein} · **Carbs** {macros.carbs} · "
        f"**Fats** {macros.fats} · **Calories** {macros.calories}",
        "",
        "## Ingredients",
    ]
    lines.extend(f"- {ingredient.name}: {ingredient.quantity}" for ingredient in recipe.ingredients)
    lines.extend(["", "## Steps"])
    lines.extend(f"{number}. {step}" for number, step in enumerate(recipe.steps, start=1))
    return "\n".join(lines)


def history_lines(entries: Sequence[HistoryEntry], now: Optional[datetime] = None) -> List[str]:
    """One "name (relative time)" line per history entry, newest first."""
    return [f"{entry.recipe.name} ({format_relative_time(entry.created_at, now)})" for entry in entries]


def run_query(query: str, debug: bool = False, diet: str = None, meal_type: str = None) -> None:
    """Execute a single query and print the generated recipe.

    Args:
        query: Ingredients or recipe request.
        debug: If True, also print the recipe as JSON.
        diet: Optional diet modifier.
        meal_type: Optional meal type.
    """
    try:
        session = initialize_recipe_session()
        logger.info(f"Running query: {query}")

        status = asyncio.run(session.submit(query, diet_filter=diet, meal_type=meal_type))

        if status is not SessionStatus.SUCCEEDED:
            message = session.error_message or session.notice or "Recipe generation failed"
            console.print(f"[red]✗ {message}[/red]")
            sys.exit(1)

        console.print()
        if debug:
            console.print("[bold cyan]Debug Mode: Full Recipe[/bold cyan]")
            console.print_json(data=session.current.model_dump(by_alias=True))
            if session.rationale:
                console.print(f"[dim]Rationale: {session.rationale}[/dim]")
            for line in history_lines(session.history):
                console.print(f"[dim]History: {line}[/dim]")
            console.print()

        console.print(Markdown(recipe_to_markdown(session.current)))

    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        # Configuration errors (e.g. missing GEMINI_API_KEY)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    debug_mode = False
    diet = None
    meal_type = None
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag in ("--diet", "--meal"):
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            if flag == "--diet":
                diet = sys.argv[argv_start]
            else:
                meal_type = sys.argv[argv_start]
            argv_start += 1
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No query provided")
        print(USAGE)
        sys.exit(1)

    query = " ".join(sys.argv[argv_start:])
    run_query(query, debug=debug_mode, diet=diet, meal_type=meal_type)
