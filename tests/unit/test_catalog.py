from cochef.services.recipe_catalog import RecipeCatalog


def seed(fake_supabase):
    fake_supabase.tables["recipes"] = [
        {"id": 1, "name": "Ärtsoppa", "servings": 4, "category": ["Soppa"], "created_at": "2024-01-01T10:00:00"},
        {"id": 2, "name": "Pannkakor", "servings": 4, "category": None, "created_at": "2024-02-01T10:00:00"},
    ]
    fake_supabase.tables["recipe_ingredients"] = [
        {"recipe_id": 2, "ingredient": "mjölk", "amount": "6", "unit": "dl"},
    ]
    fake_supabase.tables["recipe_instructions"] = [
        {"recipe_id": 2, "step_number": 2, "instruction": "Stek."},
        {"recipe_id": 2, "step_number": 1, "instruction": "Vispa."},
    ]


def test_fetch_recipes_newest_first_with_sorted_steps(fake_supabase):
    seed(fake_supabase)

    recipes = RecipeCatalog(fake_supabase).fetch_recipes()

    assert [r.name for r in recipes] == ["Pannkakor", "Ärtsoppa"]
    assert [s.instruction for s in recipes[0].instructions] == ["Vispa.", "Stek."]
    assert recipes[0].ingredients[0].as_line() == "6 dl mjölk"
    assert recipes[0].category == []


def test_recipes_are_cached_until_refresh(fake_supabase):
    seed(fake_supabase)
    catalog = RecipeCatalog(fake_supabase)
    catalog.fetch_recipes()

    fake_supabase.tables["recipes"].append(
        {"id": 3, "name": "Köttbullar", "servings": 4, "created_at": "2024-03-01T10:00:00"}
    )
    assert len(catalog.fetch_recipes()) == 2

    assert [r.name for r in catalog.refresh()][0] == "Köttbullar"


def test_get_recipe_matches_id_as_text(fake_supabase):
    seed(fake_supabase)
    catalog = RecipeCatalog(fake_supabase)

    assert catalog.get_recipe("1").name == "Ärtsoppa"
    assert catalog.get_recipe(99) is None


def test_load_failure_sets_error(fake_supabase):
    fake_supabase.fail_on["recipes"] = {"select"}
    catalog = RecipeCatalog(fake_supabase)

    assert catalog.fetch_recipes() == []
    assert catalog.error == "Failed to load recipes. Please try again later."

    fake_supabase.fail_on.clear()
    seed(fake_supabase)
    assert len(catalog.refresh()) == 2
    assert catalog.error is None


def test_invalid_rows_are_skipped(fake_supabase, caplog):
    seed(fake_supabase)
    fake_supabase.tables["recipes"].append(
        {"id": 3, "name": "Gammal", "servings": None, "created_at": "2023-01-01T10:00:00"}
    )
    catalog = RecipeCatalog(fake_supabase)

    with caplog.at_level("WARNING", logger="cochef"):
        recipes = catalog.fetch_recipes()

    assert [r.name for r in recipes] == ["Pannkakor", "Ärtsoppa"]
    assert catalog.error is None
    assert "Skipping recipe 3" in caplog.text
