import pytest

from cochef.models.schemas import OnboardingProfile, PreferencesUpdate, UserPreferences
from cochef.services.preferences import OnboardingStore, PreferenceStore


class TestPreferenceStore:

    def test_unknown_user_has_no_preferences(self, fake_supabase):
        assert PreferenceStore(fake_supabase).get("user-1") is None

    def test_update_merges_over_stored_values(self, fake_supabase):
        fake_supabase.tables["user_preferences_v2"] = [{
            "user_id": "user-1",
            "equipment": ["ingen ugn"],
            "dislikes": ["koriander"],
            "likes": [],
            "dietary_restrictions": [],
            "other_preferences": [],
        }]
        store = PreferenceStore(fake_supabase)

        merged = store.update("user-1", PreferencesUpdate(likes=["pasta"]))

        assert merged == UserPreferences(equipment=["ingen ugn"], dislikes=["koriander"], likes=["pasta"])
        row = fake_supabase.tables["user_preferences_v2"][0]
        assert row["likes"] == ["pasta"]
        assert row["dislikes"] == ["koriander"]

    def test_update_for_new_user_creates_row(self, fake_supabase):
        store = PreferenceStore(fake_supabase)

        store.update("user-2", PreferencesUpdate(dietary_restrictions=["vegetarisk"]))

        rows = fake_supabase.tables["user_preferences_v2"]
        assert len(rows) == 1
        assert rows[0]["user_id"] == "user-2"
        assert rows[0]["dietary_restrictions"] == ["vegetarisk"]
        assert rows[0]["equipment"] == []

    def test_get_uses_cache_after_update(self, fake_supabase):
        store = PreferenceStore(fake_supabase)
        store.update("user-1", PreferencesUpdate(likes=["soppa"]))
        fake_supabase.calls.clear()

        assert store.get("user-1").likes == ["soppa"]
        assert fake_supabase.calls == []

    def test_failed_update_is_raised_and_not_cached(self, fake_supabase):
        fake_supabase.fail_on["user_preferences_v2"] = {"upsert"}
        store = PreferenceStore(fake_supabase)

        with pytest.raises(RuntimeError):
            store.update("user-1", PreferencesUpdate(likes=["pasta"]))

        fake_supabase.fail_on.clear()
        assert store.get("user-1") is None

    def test_load_error_reads_as_no_preferences(self, fake_supabase):
        fake_supabase.fail_on["user_preferences_v2"] = {"select"}

        assert PreferenceStore(fake_supabase).get("user-1") is None

    def test_update_writes_nothing_when_stored_preferences_cannot_be_read(self, fake_supabase):
        fake_supabase.tables["user_preferences_v2"] = [{
            "user_id": "user-1",
            "equipment": ["ingen ugn"],
            "dislikes": ["koriander"],
            "likes": [],
            "dietary_restrictions": ["laktosfri"],
            "other_preferences": [],
        }]
        fake_supabase.fail_on["user_preferences_v2"] = {"select"}
        store = PreferenceStore(fake_supabase)

        with pytest.raises(RuntimeError):
            store.update("user-1", PreferencesUpdate(likes=["fisk"]))

        assert ("user_preferences_v2", "upsert") not in fake_supabase.calls
        row = fake_supabase.tables["user_preferences_v2"][0]
        assert row["dislikes"] == ["koriander"]
        assert row["dietary_restrictions"] == ["laktosfri"]
        assert row["likes"] == []


class TestOnboardingStore:

    def test_set_profile_inserts_new_rows(self, fake_supabase):
        store = OnboardingStore(fake_supabase)

        store.set_profile("user-1", OnboardingProfile(cooking_experience="Dålig", can_read_recipes=True))
        latest = store.set_profile("user-1", OnboardingProfile(cooking_experience="Medel"))

        assert latest.cooking_experience == "Medel"
        assert latest.can_read_recipes is True
        assert latest.created_at is not None
        assert len(fake_supabase.tables["user_preferences"]) == 2

    def test_load_returns_history_newest_first(self, fake_supabase):
        fake_supabase.tables["user_preferences"] = [
            {"user_id": "user-1", "cooking_experience": "Dålig", "created_at": "2024-01-01T10:00:00"},
            {"user_id": "user-1", "cooking_experience": "Avancerad", "created_at": "2024-03-01T10:00:00"},
            {"user_id": "user-2", "cooking_experience": "Professionell", "created_at": "2024-04-01T10:00:00"},
        ]

        latest, history = OnboardingStore(fake_supabase).load("user-1")

        assert latest.cooking_experience == "Avancerad"
        assert [p.cooking_experience for p in history] == ["Avancerad", "Dålig"]

    def test_unknown_user(self, fake_supabase):
        store = OnboardingStore(fake_supabase)

        assert store.get("user-1") is None
        assert store.load("user-1") == (None, [])

    def test_set_profile_writes_nothing_when_history_cannot_be_read(self, fake_supabase):
        fake_supabase.tables["user_preferences"] = [
            {"user_id": "user-1", "cooking_experience": "Dålig", "can_read_recipes": False, "created_at": "2024-01-01T10:00:00"},
        ]
        fake_supabase.fail_on["user_preferences"] = {"select"}
        store = OnboardingStore(fake_supabase)

        with pytest.raises(RuntimeError):
            store.set_profile("user-1", OnboardingProfile(cooking_experience="Medel"))

        assert ("user_preferences", "insert") not in fake_supabase.calls
        assert len(fake_supabase.tables["user_preferences"]) == 1

    def test_load_error_is_raised_but_get_reads_as_no_profile(self, fake_supabase):
        fake_supabase.fail_on["user_preferences"] = {"select"}
        store = OnboardingStore(fake_supabase)

        with pytest.raises(RuntimeError):
            store.load("user-1")
        assert store.get("user-1") is None

    def test_failed_insert_is_raised(self, fake_supabase):
        fake_supabase.fail_on["user_preferences"] = {"insert"}

        with pytest.raises(RuntimeError):
            OnboardingStore(fake_supabase).set_profile("user-1", OnboardingProfile(cooking_experience="Medel"))
