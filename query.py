#!/usr/bin/env python3
"""Ad hoc runner for the SnapCook recommendation pipeline.

Analyze one food photo and print the recommended recipe without any UI.

Usage:
    python query.py --image images/pasta.jpg
    python query.py --image images/pasta.jpg --goal muscle_building --calories 600
    python query.py --image images/pasta.jpg --restriction vegetarian --allergy garlic
    python query.py --image images/pasta.jpg --debug  # Show full JSON outcome

Features:
- Same image contract as the camera/upload flow (base64 data URI)
- Nutritional preferences from flags
- Debug mode to display the full outcome as JSON
- Markdown rendering of the recipe and detected ingredients
"""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown

from snapcook.capture.capture import encode_image_file
from snapcook.models.models import NutritionalPreference, OutcomeStatus
from snapcook.pipeline.pipeline import create_pipeline
from snapcook.recipes.render import render_outcome_markdown
from snapcook.utils.config import config
from snapcook.utils.errors import InvalidImageError
from snapcook.utils.logger import logger

console = Console()

USAGE = (
    "Usage: python query.py --image PATH [--goal GOAL] [--calories N] "
    "[--restriction R ...] [--allergy A ...] [--debug]"
)


def run_query(image_path: str, preferences: NutritionalPreference, debug: bool = False) -> int:
    """Run the pipeline once for an image file and print the outcome.

    Returns:
        Process exit code: 0 when a recipe was produced, 1 otherwise.
    """
    try:
        image = encode_image_file(image_path)
    except FileNotFoundError:
        console.print(f"[red]✗ Error: Image file not found: {image_path}[/red]")
        return 1
    except InvalidImageError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        return 1

    logger.info(f"Running pipeline for {image_path} (goal={preferences.goal.value})")
    try:
        outcome = asyncio.run(create_pipeline().run(image, preferences))
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        return 0

    console.print()
    if debug:
        console.print("[bold cyan]Debug Mode: Full Outcome[/bold cyan]")
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print_json(data=outcome.model_dump(mode="json"))
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print()

    console.print(Markdown(render_outcome_markdown(outcome)))
    if outcome.status is not OutcomeStatus.GENERATED:
        logger.warning(f"Pipeline finished with status: {outcome.status.value}")
    return 0 if outcome.ok else 1


def parse_args(argv: list[str]) -> tuple[str, NutritionalPreference, bool]:
    """Parse the flag list into (image path, preferences, debug).

    Raises:
        ValueError: On unknown flags, missing values or invalid preferences.
    """
    image_path = None
    debug = False
    fields: dict = {"goal": config.DEFAULT_GOAL, "dietary_restrictions": [], "allergies": []}

    index = 0
    while index < len(argv):
        flag = argv[index]
        if flag == "--debug":
            debug = True
            index += 1
            continue
        if flag not in ("--image", "--goal", "--calories", "--restriction", "--allergy"):
            raise ValueError(f"Unknown flag: {flag}")
        if index + 1 >= len(argv):
            raise ValueError(f"{flag} flag requires a value")

        value = argv[index + 1]
        if flag == "--image":
            image_path = value
        elif flag == "--goal":
            fields["goal"] = value
        elif flag == "--calories":
            fields["calorie_target"] = int(value)
        elif flag == "--restriction":
            fields["dietary_restrictions"].append(value)
        else:
            fields["allergies"].append(value)
        index += 2

    if image_path is None:
        raise ValueError("--image is required")
    return image_path, NutritionalPreference(**fields), debug


if __name__ == "__main__":
    try:
        image_path, preferences, debug_mode = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"Error: {e}")
        print(USAGE)
        sys.exit(1)

    sys.exit(run_query(image_path, preferences, debug=debug_mode))
