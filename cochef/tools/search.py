import logging
import re
from typing import Callable, Optional

from pydantic import ValidationError
from supabase import Client

from cochef.core.config import config
from cochef.core.errors import EmbeddingError
from cochef.models.schemas import RecipeMatch
from cochef.services.embeddings import generate_embedding
from cochef.services.supabase_client import get_supabase
from cochef.tools.recipe_text import compose_recipe_text

logger = logging.getLogger(__name__)

QueryExpander = Callable[[str], str]

# Servings value used when laying a query out like a stored recipe
QUERY_SERVINGS = 4

# (pattern, replacement) pairs for common Swedish word endings, e.g. "lasagne" -> "lasagna"
SWEDISH_ENDINGS = [
    (r"e\Z", "a"),
    (r"a\Z", "e"),
    (r"en\Z", "a"),
    (r"a\Z", "en"),
]


def no_expansion(query: str) -> str:
    return query


def swedish_suffix_expansion(query: str) -> str:
    """
    Appends naive inflection variants of the query.

    This only swaps a few trailing letters; it is a heuristic, not a stemmer.
    """
    variations = [query] + [re.sub(pattern, replacement, query, count=1) for pattern, replacement in SWEDISH_ENDINGS]
    return " ".join(variations)


EXPANDERS: dict[str, QueryExpander] = {
    "swedish": swedish_suffix_expansion,
    "none": no_expansion,
}


def get_query_expander(name: Optional[str] = None) -> QueryExpander:
    name = (name or config.SEARCH_QUERY_EXPANSION).lower()
    if name not in EXPANDERS:
        raise ValueError(f"Unknown query expansion '{name}'. Options: {', '.join(EXPANDERS)}")
    return EXPANDERS[name]


def build_search_text(query: str, expander: Optional[QueryExpander] = None) -> str:
    expander = expander or get_query_expander()
    variations = expander(query.strip().lower())
    return compose_recipe_text(variations, variations, QUERY_SERVINGS, [variations], [variations])


def search_recipes_by_text(
    query: str,
    match_threshold: Optional[float] = None,
    match_count: Optional[int] = None,
    *,
    expander: Optional[QueryExpander] = None,
    embed: Callable[[str], list[float]] = generate_embedding,
    client: Optional[Client] = None,
) -> list[RecipeMatch]:
    """
    Semantic search over the stored recipes.

    Args:
        query: Free-text search, e.g. "pannkakor"
        match_threshold: Minimum similarity from 0 to 1 (default 0.4)
        match_count: Maximum number of matches (default 7)

    Returns:
        Matches ranked by similarity. Provider and database failures are
        logged and give an empty list; rows that are not valid recipes are
        skipped.
    """
    if not query or not query.strip():
        raise ValueError("query must be a non-empty string")
    match_threshold = config.SEARCH_MATCH_THRESHOLD if match_threshold is None else match_threshold
    match_count = config.SEARCH_MATCH_COUNT if match_count is None else match_count
    if not 0.0 <= match_threshold <= 1.0:
        raise ValueError(f"match_threshold must be between 0 and 1, got {match_threshold}")
    if match_count < 1:
        raise ValueError(f"match_count must be at least 1, got {match_count}")

    search_text = build_search_text(query, expander)
    logger.debug(f"Search text: {search_text!r}")

    try:
        embedding = embed(search_text)
    except EmbeddingError as e:
        logger.error(f"Could not search recipes, embedding failed: {e}")
        return []

    if not embedding:
        return []

    logger.info(f"🔎 Searching recipes for '{query}' (threshold={match_threshold}, count={match_count})")
    try:
        client = client or get_supabase()
        response = client.rpc(
            "match_recipes",
            {
                "query_embedding": embedding,
                "match_threshold": match_threshold,
                "match_count": match_count,
            },
        ).execute()
        rows = response.data or []
    except Exception as e:
        logger.error(f"Error matching recipes: {e}")
        return []

    matches = []
    for row in rows:
        try:
            matches.append(RecipeMatch.model_validate(row))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping match {row.get('id')!r} that does not look like a recipe: {e}")

    matches.sort(key=lambda match: match.similarity, reverse=True)
    logger.info(f"Found recipes: {len(matches)}")
    if matches:
        logger.debug(f"First recipe similarity: {matches[0].similarity}")
    return matches[:match_count]
