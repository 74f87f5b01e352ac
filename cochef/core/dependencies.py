"""Shared service instances handed to the routers through ``Depends``."""

from functools import lru_cache
from typing import Optional

from cochef.core.prompts import build_system_prompt
from cochef.services.agent_service import ChefAgent
from cochef.services.conversation import SessionRegistry
from cochef.services.preferences import OnboardingStore, PreferenceStore
from cochef.services.recipe_catalog import RecipeCatalog


@lru_cache(maxsize=1)
def get_agent() -> ChefAgent:
    return ChefAgent()


@lru_cache(maxsize=1)
def get_catalog() -> RecipeCatalog:
    return RecipeCatalog()


@lru_cache(maxsize=1)
def get_preference_store() -> PreferenceStore:
    return PreferenceStore()


@lru_cache(maxsize=1)
def get_onboarding_store() -> OnboardingStore:
    return OnboardingStore()


def system_prompt_for(user_id: Optional[str]) -> str:
    if not user_id:
        return build_system_prompt()
    return build_system_prompt(
        profile=get_onboarding_store().get(user_id),
        preferences=get_preference_store().get(user_id),
    )


@lru_cache(maxsize=1)
def get_sessions() -> SessionRegistry:
    return SessionRegistry(system_prompt_for)
