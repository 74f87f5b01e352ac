from typing import Iterable, Optional

from cochef.models.schemas import Recipe


def compose_recipe_text(
    name: str,
    description: Optional[str],
    servings: int,
    ingredient_lines: Iterable[str],
    instruction_lines: Iterable[str],
) -> str:
    """Layout shared by stored recipes and search queries so their embeddings line up."""
    return "\n".join([
        f"Recipe: {name}",
        "",
        f"Description: {description or ''}",
        "",
        f"Servings: {servings}",
        "",
        "Ingredients:",
        "\n".join(ingredient_lines),
        "",
        "Instructions:",
        "\n".join(instruction_lines),
    ])


def recipe_to_text(recipe: Recipe) -> str:
    return compose_recipe_text(
        recipe.name,
        recipe.description,
        recipe.servings,
        (ingredient.as_line() for ingredient in recipe.ingredients),
        (step.instruction for step in recipe.instructions),
    )
