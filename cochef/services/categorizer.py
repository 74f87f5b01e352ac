import json
import logging
from typing import Optional

from openai import OpenAI

from cochef.core.config import config
from cochef.core.prompts import RECIPE_CATEGORIES, build_categorize_prompt
from cochef.models.schemas import Recipe
from cochef.services.providers import get_openai_client

logger = logging.getLogger(__name__)


def categorize_recipe(recipe: Recipe, client: Optional[OpenAI] = None) -> list[str]:
    """
    Asks the text-only provider which of the fixed categories fit the recipe.

    Unknown categories in the answer are dropped.

    Raises:
        ValueError: the answer was not the expected JSON object.
    """
    client = client or get_openai_client()
    recipe_json = recipe.model_dump_json(include={"name", "description", "servings", "ingredients", "instructions"})

    completion = client.chat.completions.create(
        model=config.OPENAI_CHAT_MODEL,
        temperature=0.2,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": build_categorize_prompt()},
            {"role": "user", "content": f"Recept:\n{recipe_json}"},
        ],
    )
    content = completion.choices[0].message.content or ""

    try:
        categories = json.loads(content)["category"]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise ValueError(f"Could not parse categories from: {content[:200]}") from e
    if not isinstance(categories, list):
        raise ValueError(f"Expected a list of categories, got {type(categories).__name__}")

    known = [c for c in categories if c in RECIPE_CATEGORIES]
    logger.info(f"🏷️ Categorized '{recipe.name}' as {known}")
    return known
