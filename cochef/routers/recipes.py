import logging

from fastapi import APIRouter, Depends, HTTPException

from cochef.core.dependencies import get_agent, get_catalog, get_onboarding_store, get_preference_store
from cochef.core.errors import RecipeStoreError
from cochef.models.schemas import DraftRequest, Recipe, RecipeMatch, SearchRequest
from cochef.services.agent_service import ChefAgent
from cochef.services.preferences import OnboardingStore, PreferenceStore
from cochef.services.recipe_catalog import RecipeCatalog
from cochef.tools.persistence import store_recipe
from cochef.tools.search import search_recipes_by_text

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recipes",
    tags=["Recipes"]
)


@router.get("", response_model=list[Recipe])
def list_recipes(catalog: RecipeCatalog = Depends(get_catalog)):
    recipes = catalog.fetch_recipes()
    if catalog.error:
        raise HTTPException(status_code=502, detail=catalog.error)
    return recipes


@router.post("", response_model=Recipe, status_code=201)
def create_recipe(recipe: Recipe, catalog: RecipeCatalog = Depends(get_catalog)):
    """Stores a recipe as given. Step numbers are reassigned 1..N."""
    try:
        row = store_recipe(recipe)
    except RecipeStoreError as e:
        raise HTTPException(status_code=502, detail=f"Error storing recipe: {e}")

    catalog.refresh()
    return recipe.model_copy(update={
        "id": row.get("id"),
        "instructions": recipe.numbered_instructions(),
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    })


@router.post("/search", response_model=list[RecipeMatch])
def search(request: SearchRequest):
    return search_recipes_by_text(request.query, request.threshold, request.count)


@router.post("/draft")
def draft_recipe(
    request: DraftRequest,
    agent: ChefAgent = Depends(get_agent),
    onboarding: OnboardingStore = Depends(get_onboarding_store),
    preferences: PreferenceStore = Depends(get_preference_store),
):
    """Lets the text model write a recipe from free-text requirements."""
    profile = onboarding.get(request.user_id) if request.user_id else None
    stored = preferences.get(request.user_id) if request.user_id else None
    return {"recipe": agent.create_recipe(request.requirements, profile, stored)}


@router.get("/{recipe_id}", response_model=Recipe)
def read_recipe(recipe_id: str, catalog: RecipeCatalog = Depends(get_catalog)):
    recipe = catalog.get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe
