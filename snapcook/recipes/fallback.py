"""Best-effort recipe selection used when image analysis fails."""

from typing import Iterable, Optional, Sequence

from snapcook.models.models import Recipe
from snapcook.recipes.catalog import RECIPE_CATALOG, CatalogRecipe
from snapcook.utils.errors import GenerationError
from snapcook.utils.logger import logger


class FallbackRecipeMatcher:
    """Picks the catalog recipe sharing the most ingredient names with a known list."""

    def __init__(self, catalog: Optional[Sequence[CatalogRecipe]] = None) -> None:
        self.catalog = list(RECIPE_CATALOG if catalog is None else catalog)

    def match(self, known_ingredients: Iterable[str]) -> Recipe:
        """Return the best match; ties go to the earlier catalog entry.

        With no known ingredients every score is 0, so the first entry wins.

        Raises:
            GenerationError: If the catalog is empty.
        """
        if not self.catalog:
            raise GenerationError("Fallback recipe catalog is empty")

        known = {name.strip().lower() for name in known_ingredients}
        best = self.catalog[0]
        best_score = -1
        for entry in self.catalog:
            score = len(known & {name.lower() for name in entry.ingredients})
            if score > best_score:
                best, best_score = entry, score

        logger.info(f"Fallback selected '{best.name}' ({best_score} shared ingredient(s))")
        return best.to_recipe()
