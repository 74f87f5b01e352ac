"""Local implementations of the functions the chat model can call."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from cochef.core.errors import RecipeStoreError
from cochef.models.schemas import (
    INVALID_ARGUMENTS,
    FunctionCallResult,
    Recipe,
    RecipeMatch,
    SearchRecipeArgs,
    SetTimerArgs,
    StoreRecipeArgs,
    StoreUserInfoArgs,
)
from cochef.services.categorizer import categorize_recipe
from cochef.services.preferences import PreferenceStore
from cochef.services.recipe_catalog import RecipeCatalog
from cochef.services.timer import TimerService
from cochef.tools.persistence import store_recipe
from cochef.tools.search import search_recipes_by_text

logger = logging.getLogger(__name__)


@dataclass
class FunctionContext:
    """Collaborators available to function handlers during one chat turn."""

    timer: TimerService
    catalog: Optional[RecipeCatalog] = None
    preferences: Optional[PreferenceStore] = None
    user_id: Optional[str] = None
    search: Callable[[str], list[RecipeMatch]] = search_recipes_by_text
    store: Callable[[Recipe], dict] = store_recipe
    categorize: Optional[Callable[[Recipe], list[str]]] = categorize_recipe


def set_timer(args: SetTimerArgs, context: FunctionContext) -> FunctionCallResult:
    context.timer.set_timer(args.duration)
    return FunctionCallResult(success=True, message=f"Timer set for {args.duration} seconds")


def search_recipe(args: SearchRecipeArgs, context: FunctionContext) -> FunctionCallResult:
    matches = context.search(args.recipe)
    return FunctionCallResult(
        success=True,
        message=f"Found {len(matches)} recipes",
        recipes=list(matches),
    )


def store_new_recipe(args: StoreRecipeArgs, context: FunctionContext) -> FunctionCallResult:
    recipe = args.recipe_data

    if context.categorize is not None:
        try:
            recipe = recipe.model_copy(update={"category": context.categorize(recipe)})
        except Exception as e:
            # The recipe is still worth storing without tags
            logger.warning(f"⚠️ Could not categorize '{recipe.name}': {e}")

    try:
        context.store(recipe)
    except RecipeStoreError as e:
        logger.error(f"Error storing recipe: {e}")
        return FunctionCallResult(success=False, message="Failed to store recipe")

    if context.catalog is not None:
        context.catalog.refresh()
    return FunctionCallResult(success=True, message="Recipe stored successfully")


def store_user_info(args: StoreUserInfoArgs, context: FunctionContext) -> FunctionCallResult:
    if not context.user_id or context.preferences is None:
        return INVALID_ARGUMENTS

    context.preferences.update(context.user_id, args.preferences)
    return FunctionCallResult(success=True, message="User info stored successfully")
