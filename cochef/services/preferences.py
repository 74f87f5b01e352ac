import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from cochef.models.schemas import OnboardingProfile, PreferencesUpdate, UserPreferences
from cochef.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = list(UserPreferences.model_fields)
PROFILE_FIELDS = ["cooking_experience", "can_read_recipes", "dietary_restrictions", "equipment", "created_at"]


class PreferenceStore:
    """Cooking preferences gathered during chat, one row per user in ``user_preferences_v2``."""

    table = "user_preferences_v2"

    def __init__(self, client: Optional[Client] = None):
        self._client = client
        self._cache: dict[str, UserPreferences] = {}
        self._lock = threading.Lock()

    @property
    def client(self) -> Client:
        return self._client or get_supabase()

    def get(self, user_id: str) -> Optional[UserPreferences]:
        """Cached preferences, loading them on first access. A failed read gives None."""
        try:
            return self._current(user_id)
        except Exception:
            return None

    def _current(self, user_id: str) -> Optional[UserPreferences]:
        with self._lock:
            cached = self._cache.get(user_id)
        return cached if cached is not None else self.load(user_id)

    def load(self, user_id: str) -> Optional[UserPreferences]:
        """Stored preferences, or None when the user has no row. Database errors are re-raised."""
        try:
            response = self.client.table(self.table)\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading preferences for {user_id}: {e}")
            raise

        if not response.data:
            return None

        row = response.data[0]
        preferences = UserPreferences(**{field: row.get(field) or [] for field in PREFERENCE_FIELDS})
        with self._lock:
            self._cache[user_id] = preferences
        return preferences

    def update(self, user_id: str, update: PreferencesUpdate) -> UserPreferences:
        """
        Merges ``update`` over the stored preferences and saves the result.

        Fields missing from ``update`` keep their previous values. Database
        errors are logged and re-raised; the cached value is then unchanged.
        Nothing is written when the stored preferences cannot be read.
        """
        current = self._current(user_id) or UserPreferences()
        merged = current.merged(update)

        try:
            self.client.table(self.table).upsert({
                "user_id": user_id,
                **merged.model_dump(),
            }).execute()
        except Exception as e:
            logger.error(f"Error updating preferences for {user_id}: {e}")
            raise

        with self._lock:
            self._cache[user_id] = merged
        logger.info(f"💾 Stored preferences for user {user_id}")
        return merged

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._cache.pop(user_id, None)


class OnboardingStore:
    """Onboarding answers. Every change is inserted as a new ``user_preferences`` row."""

    table = "user_preferences"

    def __init__(self, client: Optional[Client] = None):
        self._client = client
        self._profiles: dict[str, OnboardingProfile] = {}
        self._lock = threading.Lock()

    @property
    def client(self) -> Client:
        return self._client or get_supabase()

    def get(self, user_id: str) -> Optional[OnboardingProfile]:
        try:
            return self._current(user_id)
        except Exception:
            return None

    def _current(self, user_id: str) -> Optional[OnboardingProfile]:
        with self._lock:
            cached = self._profiles.get(user_id)
        if cached is not None:
            return cached
        profile, _ = self.load(user_id)
        return profile

    def load(self, user_id: str) -> tuple[Optional[OnboardingProfile], list[OnboardingProfile]]:
        """Returns the latest profile and the full history, newest first. Database errors are re-raised."""
        try:
            response = self.client.table(self.table)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading preferences history for {user_id}: {e}")
            raise

        history = [
            OnboardingProfile(**{field: row.get(field) for field in PROFILE_FIELDS})
            for row in response.data or []
        ]
        if not history:
            return None, []

        with self._lock:
            self._profiles[user_id] = history[0]
        return history[0], history

    def set_profile(self, user_id: str, update: OnboardingProfile) -> OnboardingProfile:
        current = self._current(user_id) or OnboardingProfile()
        merged = current.model_copy(update={
            **update.model_dump(exclude_none=True),
            "created_at": datetime.now(timezone.utc).isoformat(),
        })

        try:
            self.client.table(self.table).insert({
                "user_id": user_id,
                **merged.model_dump(),
            }).execute()
        except Exception as e:
            logger.error(f"Error saving preferences to Supabase for {user_id}: {e}")
            raise

        with self._lock:
            self._profiles[user_id] = merged
        return merged

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._profiles.pop(user_id, None)
