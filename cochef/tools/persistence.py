import logging
from typing import Callable, Optional

from supabase import Client

from cochef.core.config import config
from cochef.core.errors import RecipeStoreError
from cochef.models.schemas import Recipe
from cochef.services.embeddings import generate_embedding
from cochef.services.supabase_client import get_supabase
from cochef.tools.recipe_text import recipe_to_text

logger = logging.getLogger(__name__)


def store_recipe(
    recipe: Recipe,
    *,
    embed: Callable[[str], list[float]] = generate_embedding,
    client: Optional[Client] = None,
    cleanup_on_failure: Optional[bool] = None,
) -> dict:
    """
    Stores a recipe with its embedding so it can be found by similarity search.

    Writes the ``recipes`` row first, then ``recipe_ingredients`` and
    ``recipe_instructions`` keyed by the new id. Instruction step numbers are
    always rewritten to 1..N in the given order.

    Supabase offers no multi-table transaction over the REST API, so a failure
    after the first insert either deletes what was written
    (``cleanup_on_failure``, default from STORE_CLEANUP_ON_FAILURE) or leaves
    the recipe row behind without children.

    Returns:
        The inserted ``recipes`` row.

    Raises:
        RecipeStoreError: any step failed; remaining steps were not run.
    """
    if cleanup_on_failure is None:
        cleanup_on_failure = config.STORE_CLEANUP_ON_FAILURE

    try:
        embedding = embed(recipe_to_text(recipe))
    except Exception as e:
        raise RecipeStoreError(f"Failed to generate embedding: {e}") from e
    if not embedding:
        raise RecipeStoreError("Failed to generate embedding")

    try:
        client = client or get_supabase()
        response = client.table("recipes").insert({
            "name": recipe.name,
            "description": recipe.description,
            "servings": recipe.servings,
            "embedding": embedding,
            "category": recipe.category,
        }).execute()
    except Exception as e:
        logger.error(f"Error inserting recipe '{recipe.name}': {e}")
        raise RecipeStoreError(f"Failed to insert recipe: {e}") from e

    if not response.data:
        raise RecipeStoreError("Database insert failed: no recipe row returned")

    recipe_row = response.data[0]
    recipe_id = recipe_row["id"]
    logger.info(f"📝 Inserted recipe {recipe_id} '{recipe.name}'")

    ingredient_rows = [
        {
            "recipe_id": recipe_id,
            "ingredient": ingredient.ingredient,
            "amount": ingredient.amount,
            "unit": ingredient.unit,
        }
        for ingredient in recipe.ingredients
    ]
    instruction_rows = [
        {
            "recipe_id": recipe_id,
            "step_number": step.step_number,
            "instruction": step.instruction,
        }
        for step in recipe.numbered_instructions()
    ]

    for table, rows in (("recipe_ingredients", ingredient_rows), ("recipe_instructions", instruction_rows)):
        if not rows:
            continue
        try:
            client.table(table).insert(rows).execute()
        except Exception as e:
            logger.error(f"Error inserting {table} for recipe {recipe_id}: {e}")
            cleaned_up = cleanup_on_failure and _delete_recipe(client, recipe_id)
            if not cleaned_up:
                logger.warning(f"⚠️ Recipe {recipe_id} is left without its {table}")
            raise RecipeStoreError(
                f"Failed to insert {table}: {e}",
                recipe_id=recipe_id,
                cleaned_up=cleaned_up,
            ) from e

    logger.info(f"✅ Stored recipe {recipe_id} with {len(ingredient_rows)} ingredients and {len(instruction_rows)} steps")
    return recipe_row


def _delete_recipe(client: Client, recipe_id) -> bool:
    """Removes a partially written recipe. Returns False if the cleanup failed."""
    try:
        for table in ("recipe_instructions", "recipe_ingredients"):
            client.table(table).delete().eq("recipe_id", recipe_id).execute()
        client.table("recipes").delete().eq("id", recipe_id).execute()
    except Exception as e:
        logger.error(f"Cleanup of recipe {recipe_id} failed: {e}")
        return False
    logger.info(f"Removed partially stored recipe {recipe_id}")
    return True
