"""The one list of functions offered to the chat model.

Each entry ties the provider-facing declaration to its argument model and its
handler, so the declarations and the dispatch table cannot drift apart.
"""

from dataclasses import dataclass
from typing import Callable

from google.genai import types
from pydantic import BaseModel

from cochef.models.schemas import (
    FunctionCallResult,
    SearchRecipeArgs,
    SetTimerArgs,
    StoreRecipeArgs,
    StoreUserInfoArgs,
)
from cochef.tools import handlers

STRING = types.Schema(type=types.Type.STRING)
STRING_LIST = types.Schema(type=types.Type.ARRAY, items=STRING)


@dataclass(frozen=True)
class FunctionSpec:
    args_model: type[BaseModel]
    description: str
    parameters: types.Schema
    handler: Callable[[BaseModel, "handlers.FunctionContext"], FunctionCallResult]

    @property
    def name(self) -> str:
        return self.args_model.function_name

    def declaration(self) -> types.FunctionDeclaration:
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )


recipe_schema = types.Schema(
    type=types.Type.OBJECT,
    description="the recipe data to store",
    properties={
        "name": STRING,
        "description": types.Schema(type=types.Type.STRING, nullable=True),
        "servings": types.Schema(type=types.Type.INTEGER, description="number of servings, at least 1"),
        "ingredients": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "ingredient": STRING,
                    "amount": types.Schema(type=types.Type.STRING, nullable=True),
                    "unit": types.Schema(type=types.Type.STRING, nullable=True),
                },
                required=["ingredient"],
            ),
        ),
        "instructions": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "step_number": types.Schema(type=types.Type.INTEGER),
                    "instruction": STRING,
                },
                required=["step_number", "instruction"],
            ),
        ),
    },
    required=["name", "servings", "ingredients", "instructions"],
)

FUNCTION_SPECS = [
    FunctionSpec(
        args_model=SetTimerArgs,
        description="sets a timer for a requested amount of time",
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "duration": types.Schema(type=types.Type.INTEGER, description="duration in seconds"),
            },
            required=["duration"],
        ),
        handler=handlers.set_timer,
    ),
    FunctionSpec(
        args_model=SearchRecipeArgs,
        description="searches for a recipe by name",
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "recipe": types.Schema(type=types.Type.STRING, description="the name of the recipe"),
            },
            required=["recipe"],
        ),
        handler=handlers.search_recipe,
    ),
    FunctionSpec(
        args_model=StoreRecipeArgs,
        description="stores a new recipe in the database",
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={"recipeData": recipe_schema},
            required=["recipeData"],
        ),
        handler=handlers.store_new_recipe,
    ),
    FunctionSpec(
        args_model=StoreUserInfoArgs,
        description="stores user preferences and information",
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "preferences": types.Schema(
                    type=types.Type.OBJECT,
                    description="user preferences and information",
                    properties={
                        "equipment": STRING_LIST,
                        "dislikes": STRING_LIST,
                        "likes": STRING_LIST,
                        "dietary_restrictions": STRING_LIST,
                        "other_preferences": STRING_LIST,
                    },
                    required=["equipment", "dislikes", "likes", "dietary_restrictions", "other_preferences"],
                ),
            },
            required=["preferences"],
        ),
        handler=handlers.store_user_info,
    ),
]

AVAILABLE_FUNCTIONS: dict[str, FunctionSpec] = {spec.name: spec for spec in FUNCTION_SPECS}

tools = [
    types.Tool(function_declarations=[spec.declaration() for spec in FUNCTION_SPECS]),
]
