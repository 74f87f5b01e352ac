import logging
import threading
from typing import Optional

from pydantic import ValidationError
from supabase import Client

from cochef.models.schemas import Recipe
from cochef.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = """
    id,
    name,
    description,
    servings,
    category,
    created_at,
    updated_at,
    recipe_ingredients (
        ingredient,
        amount,
        unit
    ),
    recipe_instructions (
        step_number,
        instruction
    )
"""


class RecipeCatalog:
    """Cached list of stored recipes, newest first.

    The cache is filled on first use and kept until ``clear`` or ``refresh``.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client
        self._recipes: list[Recipe] = []
        self._lock = threading.Lock()
        self.error: Optional[str] = None

    @property
    def client(self) -> Client:
        return self._client or get_supabase()

    def fetch_recipes(self) -> list[Recipe]:
        with self._lock:
            if self._recipes:
                return list(self._recipes)

            logger.info("📥 Loading recipes from Supabase...")
            self.error = None
            try:
                response = self.client.table("recipes")\
                    .select(RECIPE_COLUMNS)\
                    .order("created_at", desc=True)\
                    .execute()
            except Exception as e:
                logger.error(f"Error fetching recipes: {e}")
                self.error = "Failed to load recipes. Please try again later."
                return []

            recipes = []
            for row in response.data or []:
                try:
                    recipes.append(Recipe.model_validate(row))
                except ValidationError as e:
                    logger.warning(f"⚠️ Skipping recipe {row.get('id')!r}: {e}")

            for recipe in recipes:
                recipe.instructions.sort(key=lambda step: step.step_number)
            self._recipes = recipes
            logger.info(f"✅ Loaded {len(recipes)} recipes into cache")
            return list(recipes)

    def get_recipe(self, recipe_id) -> Optional[Recipe]:
        for recipe in self.fetch_recipes():
            if str(recipe.id) == str(recipe_id):
                return recipe
        return None

    def clear(self) -> None:
        with self._lock:
            self._recipes = []
            self.error = None

    def refresh(self) -> list[Recipe]:
        self.clear()
        return self.fetch_recipes()
