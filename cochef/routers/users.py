import logging

from fastapi import APIRouter, Depends, HTTPException

from cochef.core.dependencies import get_onboarding_store, get_preference_store
from cochef.models.schemas import OnboardingProfile, PreferencesUpdate, UserPreferences
from cochef.services.preferences import OnboardingStore, PreferenceStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


@router.get("/{user_id}/preferences", response_model=UserPreferences)
def read_preferences(user_id: str, store: PreferenceStore = Depends(get_preference_store)):
    try:
        preferences = store.load(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading preferences: {str(e)}")
    if preferences is None:
        raise HTTPException(status_code=404, detail="No preferences stored for this user")
    return preferences


@router.patch("/{user_id}/preferences", response_model=UserPreferences)
def update_preferences(
    user_id: str,
    update: PreferencesUpdate,
    store: PreferenceStore = Depends(get_preference_store),
):
    try:
        return store.update(user_id, update)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating preferences: {str(e)}")


@router.get("/{user_id}/profile")
def read_profile(user_id: str, store: OnboardingStore = Depends(get_onboarding_store)):
    try:
        profile, history = store.load(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading profile: {str(e)}")
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found. Please complete onboarding.")
    return {
        "profile": profile.model_dump(),
        "history": [entry.model_dump() for entry in history],
    }


@router.patch("/{user_id}/profile", response_model=OnboardingProfile)
def update_profile(
    user_id: str,
    update: OnboardingProfile,
    store: OnboardingStore = Depends(get_onboarding_store),
):
    try:
        return store.set_profile(user_id, update)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving profile: {str(e)}")
