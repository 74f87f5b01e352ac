"""Shared fixtures: in-memory stand-ins for Supabase and the model providers."""

import copy
import itertools
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
from google.genai import types

from cochef.core.errors import EmbeddingError
from cochef.services.timer import TimerService


# =============================================================================
# Supabase
# =============================================================================

class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Records one chained table call and applies it to the fake database on execute()."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_by: Optional[tuple[str, bool]] = None
        self.limit_n: Optional[int] = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op, self.payload = "insert", rows
        return self

    def upsert(self, row):
        self.op, self.payload = "upsert", row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if self.op in self.db.fail_on.get(self.table, set()):
            raise RuntimeError(f"simulated {self.op} failure on {self.table}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in new_rows:
                row = copy.deepcopy(row)
                row.setdefault("id", next(self.db.ids))
                row.setdefault("created_at", f"2024-01-01T00:00:{row['id']:02d}")
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        if self.op == "upsert":
            row = copy.deepcopy(self.payload)
            existing = [r for r in rows if r.get("user_id") == row.get("user_id")]
            if existing:
                existing[0].update(row)
            else:
                rows.append(row)
            return FakeResponse([copy.deepcopy(row)])

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)

        selected = [copy.deepcopy(r) for r in rows if self._matches(r)]
        if self.table == "recipes":
            for recipe in selected:
                recipe["recipe_ingredients"] = [
                    r for r in self.db.tables.get("recipe_ingredients", []) if r["recipe_id"] == recipe["id"]
                ]
                recipe["recipe_instructions"] = [
                    r for r in self.db.tables.get("recipe_instructions", []) if r["recipe_id"] == recipe["id"]
                ]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self.limit_n is not None:
            selected = selected[: self.limit_n]
        return FakeResponse(selected)


class FakeRpc:
    def __init__(self, db, name, params):
        self.db, self.name, self.params = db, name, params

    def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        if self.db.rpc_error is not None:
            raise self.db.rpc_error
        threshold = self.params["match_threshold"]
        rows = [r for r in self.db.rpc_rows if r["similarity"] >= threshold]
        rows.sort(key=lambda r: r["similarity"], reverse=True)
        return FakeResponse(copy.deepcopy(rows[: self.params["match_count"]]))


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.fail_on: dict[str, set[str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.rpc_rows: list[dict] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.rpc_error: Optional[Exception] = None
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


# =============================================================================
# Embeddings
# =============================================================================

@pytest.fixture
def fake_embed():
    embed = MagicMock(return_value=[0.1, 0.2, 0.3])
    return embed


@pytest.fixture
def failing_embed():
    return MagicMock(side_effect=EmbeddingError("Failed to generate embedding"))


# =============================================================================
# Gemini
# =============================================================================

def text_response(text: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))]
    )


def call_response(*calls: tuple[str, dict]) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(function_call=types.FunctionCall(name=name, args=args)) for name, args in calls],
                )
            )
        ]
    )


class FakeModels:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": list(contents), "config": config})
        if not self.responses:
            raise RuntimeError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeGemini:
    def __init__(self, *responses):
        self.models = FakeModels(responses)


# =============================================================================
# OpenAI chat completions
# =============================================================================

def completion(content: str):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_openai():
    client = MagicMock()
    client.chat.completions.create.return_value = completion("Pannkakor\n\n4 portioner")
    return client


@pytest.fixture
def timer():
    return TimerService()


@pytest.fixture
def recipe_data():
    return {
        "name": "Pannkakor",
        "description": "Tunna svenska pannkakor",
        "servings": 4,
        "ingredients": [
            {"ingredient": "vetemjöl", "amount": "2.5", "unit": "dl"},
            {"ingredient": "mjölk", "amount": "6", "unit": "dl"},
            {"ingredient": "ägg", "amount": 3},
        ],
        "instructions": [
            {"step_number": 5, "instruction": "Vispa mjöl och hälften av mjölken."},
            {"step_number": 5, "instruction": "Vispa i resten av mjölken och äggen."},
            {"step_number": 1, "instruction": "Stek tunna pannkakor i smör."},
        ],
    }


def match_row(recipe_id, name, similarity, **extra):
    row = {
        "id": recipe_id,
        "name": name,
        "description": None,
        "servings": 4,
        "recipe_ingredients": [{"ingredient": "ägg", "amount": "2", "unit": None}],
        "recipe_instructions": [{"step_number": 1, "instruction": "Koka."}],
        "similarity": similarity,
    }
    row.update(extra)
    return row
