"""Markdown rendering of recipes and pipeline outcomes for display."""

from snapcook.models.models import OutcomeStatus, Recipe, RecommendationOutcome


def render_recipe_markdown(recipe: Recipe) -> str:
    """Title, macro summary, ingredients, numbered instructions and tags."""
    info = recipe.nutritional_info
    lines = [
        f"# {recipe.title}",
        "",
        f"**{recipe.cooking_time} min** · {recipe.servings} servings · {recipe.difficulty}",
        "",
        "| Calories | Protein | Carbs | Fat |",
        "|---|---|---|---|",
        f"| {info.calories:g} | {info.protein:g}g | {info.carbs:g}g | {info.fat:g}g |",
    ]

    if recipe.ingredients:
        lines += ["", "## Ingredients", ""]
        lines += [f"- {item.amount} {item.name} ({item.calories:g} kcal)" for item in recipe.ingredients]

    lines += ["", "## Instructions", ""]
    lines += [f"{number}. {step}" for number, step in enumerate(recipe.instructions, start=1)]

    if recipe.tags:
        lines += ["", "Tags: " + ", ".join(f"`{tag}`" for tag in recipe.tags)]

    return "\n".join(lines)


def render_outcome_markdown(outcome: RecommendationOutcome) -> str:
    """Recipe plus detected ingredients, or the user-facing message when no recipe was produced."""
    if outcome.recipe is None:
        return f"**{outcome.message or 'No recipe available.'}**"

    parts = []
    if outcome.status is not OutcomeStatus.GENERATED and outcome.message:
        parts.append(f"> {outcome.message}")
    parts.append(render_recipe_markdown(outcome.recipe))

    if outcome.analysis is not None:
        analysis = outcome.analysis
        detected = ", ".join(
            f"{ingredient.name} ({ingredient.confidence:.0%})" for ingredient in analysis.ingredients
        )
        parts.append(
            f"**Detected ingredients:** {detected}\n\n"
            f"**Image quality:** {analysis.image_quality.value} · "
            f"**You could also make:** {', '.join(analysis.possible_dishes)}"
        )
    return "\n\n".join(parts)
