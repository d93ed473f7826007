"""Built-in recipe catalog: browsing, tag filtering and favorites.

The same catalog backs the fallback path of the recommendation pipeline
(see snapcook.recipes.fallback).
"""

from typing import Annotated, List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from snapcook.models.models import NutritionInfo, Recipe, RecipeIngredient


class CatalogRecipe(BaseModel):
    """Catalog entry as shown on the recipe browser."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: Annotated[str, Field(min_length=1, max_length=200)]
    image: str
    description: str
    tags: Annotated[List[str], Field(default_factory=list)]
    time: Annotated[int, Field(ge=0, description="Total time in minutes")]
    calories: Annotated[float, Field(ge=0)]
    protein: Annotated[float, Field(ge=0)]
    carbs: Annotated[float, Field(ge=0)]
    fat: Annotated[float, Field(ge=0)]
    ingredients: Annotated[List[str], Field(min_length=1, description="Main ingredient names")]
    instructions: Annotated[List[str], Field(min_length=1)]
    is_favorite: bool = False

    def to_recipe(self, servings: int = 2) -> Recipe:
        """Convert to the generated-recipe record; calories are split evenly across ingredients."""
        per_ingredient = round(self.calories / len(self.ingredients), 1)
        return Recipe(
            title=self.name,
            ingredients=[
                RecipeIngredient(name=name, amount="1 portion", calories=per_ingredient) for name in self.ingredients
            ],
            instructions=self.instructions,
            nutritional_info=NutritionInfo(
                calories=self.calories, protein=self.protein, carbs=self.carbs, fat=self.fat
            ),
            cooking_time=self.time,
            servings=servings,
            difficulty="Easy" if self.time <= 25 else "Medium",
            tags=self.tags,
            image_url=self.image,
        )


RECIPE_CATALOG: tuple[CatalogRecipe, ...] = (
    CatalogRecipe(
        id=1,
        name="Veggie Pasta Primavera",
        image="https://images.unsplash.com/photo-1618160702438-9b02ab6515c9",
        description="A delicious pasta dish loaded with fresh spring vegetables.",
        tags=["vegetarian", "pasta", "quick"],
        time=25,
        calories=450,
        protein=14,
        carbs=68,
        fat=12,
        ingredients=["Pasta", "Tomato", "Zucchini", "Bell Pepper", "Garlic", "Olive Oil"],
        instructions=[
            "Cook the pasta in salted boiling water until al dente.",
            "Sauté the garlic in olive oil, then add the zucchini and bell pepper.",
            "Add the tomato and simmer for 5 minutes.",
            "Toss the pasta with the vegetables and serve.",
        ],
    ),
    CatalogRecipe(
        id=2,
        name="Spicy Chicken Stir-Fry",
        image="https://images.unsplash.com/photo-1465146344425-f00d5f5c8f07",
        description="A quick and flavorful stir-fry with chicken and vegetables.",
        tags=["high-protein", "poultry", "spicy"],
        time=20,
        calories=380,
        protein=32,
        carbs=28,
        fat=14,
        ingredients=["Chicken Breast", "Bell Pepper", "Onion", "Garlic", "Chili Flakes"],
        instructions=[
            "Slice the chicken breast into thin strips.",
            "Stir-fry the chicken in a hot wok until browned, then set aside.",
            "Stir-fry the onion, bell pepper and garlic for 3 minutes.",
            "Return the chicken, season with chili flakes and serve.",
        ],
        is_favorite=True,
    ),
    CatalogRecipe(
        id=3,
        name="Mediterranean Quinoa Bowl",
        image="https://images.unsplash.com/photo-1618160702438-9b02ab6515c9",
        description="A healthy and refreshing quinoa bowl with mediterranean flavors.",
        tags=["vegan", "grain", "healthy"],
        time=30,
        calories=320,
        protein=11,
        carbs=42,
        fat=12,
        ingredients=["Quinoa", "Cucumber", "Tomato", "Red Onion", "Chickpeas", "Olive Oil"],
        instructions=[
            "Rinse and cook the quinoa, then let it cool.",
            "Dice the cucumber, tomato and red onion.",
            "Combine with the chickpeas and dress with olive oil.",
            "Spoon over the quinoa and serve.",
        ],
    ),
    CatalogRecipe(
        id=4,
        name="Creamy Mushroom Risotto",
        image="https://images.unsplash.com/photo-1465146344425-f00d5f5c8f07",
        description="A rich and creamy Italian risotto featuring savory mushrooms.",
        tags=["vegetarian", "grain", "gourmet"],
        time=40,
        calories=520,
        protein=14,
        carbs=72,
        fat=18,
        ingredients=["Arborio Rice", "Mushroom", "Onion", "Garlic", "Parmesan", "Vegetable Broth"],
        instructions=[
            "Sauté the onion and garlic until soft.",
            "Add the mushrooms and cook until browned.",
            "Toast the rice, then add warm broth a ladle at a time, stirring often.",
            "Finish with parmesan and serve immediately.",
        ],
    ),
)

FILTER_OPTIONS = [
    {"id": "all", "label": "All Recipes"},
    {"id": "vegetarian", "label": "Vegetarian"},
    {"id": "vegan", "label": "Vegan"},
    {"id": "high-protein", "label": "High Protein"},
    {"id": "quick", "label": "Quick & Easy"},
    {"id": "spicy", "label": "Spicy"},
]


def filter_by_tag(recipes: Sequence[CatalogRecipe], tag: str) -> list[CatalogRecipe]:
    """Recipes carrying `tag`; "all" returns every recipe."""
    if tag == "all":
        return list(recipes)
    return [recipe for recipe in recipes if tag in recipe.tags]


def toggle_favorite(recipes: Sequence[CatalogRecipe], recipe_id: int) -> list[CatalogRecipe]:
    """New list with the favorite flag of `recipe_id` flipped; unknown ids change nothing."""
    return [
        recipe.model_copy(update={"is_favorite": not recipe.is_favorite}) if recipe.id == recipe_id else recipe
        for recipe in recipes
    ]


def favorites(recipes: Sequence[CatalogRecipe]) -> list[CatalogRecipe]:
    return [recipe for recipe in recipes if recipe.is_favorite]
