from typing import Any, ClassVar, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# --- Recipes ---

class Ingredient(BaseModel):
    ingredient: str = Field(min_length=1)
    amount: Optional[str] = None  # e.g. "2", "1/2"
    unit: Optional[str] = None  # e.g. "dl", "st"

    @field_validator("amount", "unit", mode="before")
    @classmethod
    def empty_or_number_to_text(cls, value: Any) -> Any:
        # The model sometimes sends amounts as numbers
        if isinstance(value, bool):
            raise ValueError("must be a string")
        if isinstance(value, (int, float)):
            return f"{value:g}"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def as_line(self) -> str:
        return " ".join(part for part in (self.amount, self.unit, self.ingredient) if part)


class Instruction(BaseModel):
    step_number: int = 0  # reassigned by insertion order on write
    instruction: str = Field(min_length=1)


class Recipe(BaseModel):
    """A recipe as exchanged with the database and the model.

    Accepts both ``ingredients``/``instructions`` and the table-shaped
    ``recipe_ingredients``/``recipe_instructions`` keys.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    servings: int = Field(gt=0)
    ingredients: list[Ingredient] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ingredients", "recipe_ingredients"),
    )
    instructions: list[Instruction] = Field(
        default_factory=list,
        validation_alias=AliasChoices("instructions", "recipe_instructions"),
    )
    category: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("ingredients", "instructions", "category", mode="before")
    @classmethod
    def null_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def numbered_instructions(self) -> list[Instruction]:
        """Instructions renumbered 1..N in their current order."""
        return [
            Instruction(step_number=index, instruction=step.instruction)
            for index, step in enumerate(self.instructions, start=1)
        ]


class RecipeMatch(Recipe):
    similarity: float


# --- Function calling ---

class FunctionCallResult(BaseModel):
    success: Optional[bool] = None
    message: Optional[str] = None
    recipes: Optional[list[RecipeMatch]] = None

    def to_response(self) -> dict:
        """Plain dict handed back to the model as the function response."""
        return self.model_dump(mode="json", exclude_none=True)


INVALID_ARGUMENTS = FunctionCallResult(success=False, message="Invalid function arguments")


class SetTimerArgs(BaseModel):
    function_name: ClassVar[str] = "setTimer"

    duration: int = Field(ge=0, description="duration in seconds")

    @field_validator("duration", mode="before")
    @classmethod
    def must_be_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("duration must be a number")
        return value


class SearchRecipeArgs(BaseModel):
    function_name: ClassVar[str] = "searchRecipe"

    recipe: str = Field(min_length=1, strict=True)


class StoreRecipeArgs(BaseModel):
    function_name: ClassVar[str] = "storeRecipe"

    recipe_data: Recipe = Field(alias="recipeData")


class PreferencesUpdate(BaseModel):
    """Partial preferences; fields left out keep their stored values."""

    equipment: Optional[list[str]] = None
    dislikes: Optional[list[str]] = None
    likes: Optional[list[str]] = None
    dietary_restrictions: Optional[list[str]] = None
    other_preferences: Optional[list[str]] = None


class StoreUserInfoArgs(BaseModel):
    function_name: ClassVar[str] = "storeUserInfo"

    preferences: PreferencesUpdate


FunctionArgs = Union[SetTimerArgs, SearchRecipeArgs, StoreRecipeArgs, StoreUserInfoArgs]


# --- Users ---

class UserPreferences(BaseModel):
    equipment: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)
    likes: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    other_preferences: list[str] = Field(default_factory=list)

    def merged(self, update: PreferencesUpdate) -> "UserPreferences":
        return self.model_copy(update=update.model_dump(exclude_none=True))


CookingExperience = Literal["Dålig", "Medel", "Avancerad", "Professionell"]


class OnboardingProfile(BaseModel):
    cooking_experience: Optional[CookingExperience] = None
    can_read_recipes: Optional[bool] = None
    dietary_restrictions: Optional[str] = None
    equipment: Optional[list[str]] = None
    created_at: Optional[str] = None


# --- Chat ---

class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1, max_length=4000)
    user_id: Optional[str] = None  # used for the system prompt and storeUserInfo


class ChatReply(BaseModel):
    text: str
    recipes: Optional[list[RecipeMatch]] = None
    error: bool = False


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    count: Optional[int] = Field(None, ge=1)


class DraftRequest(BaseModel):
    requirements: str = Field(min_length=1)
    user_id: Optional[str] = None


class TimerStatus(BaseModel):
    duration: int
    show_timer: bool
    remaining_seconds: int
