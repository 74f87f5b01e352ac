import logging
from typing import Optional

from google import genai
from google.genai import types
from openai import OpenAI

from cochef.core.config import config
from cochef.core.errors import ProviderResponseError
from cochef.core.prompts import build_recipe_creation_prompt
from cochef.models.schemas import ChatMessage, ChatReply, OnboardingProfile, RecipeMatch, UserPreferences
from cochef.services.conversation import Conversation
from cochef.services.providers import get_gemini_client, get_openai_client
from cochef.tools.call_function import call_function
from cochef.tools.handlers import FunctionContext
from cochef.tools.registry import tools

logger = logging.getLogger(__name__)

CHAT_ERROR_TEXT = "I apologize, but I encountered an error. Could you please rephrase your question?"
RECIPE_ERROR_TEXT = "I apologize, but I encountered an error while creating the recipe. Could you please try again?"


def history_to_contents(history: list[ChatMessage]) -> list[types.Content]:
    """Gemini contents for the non-system messages of a conversation."""
    return [
        types.Content(
            role="user" if message.role == "user" else "model",
            parts=[types.Part(text=message.content)],
        )
        for message in history
        if message.role != "system"
    ]


def first_function_call_part(content: types.Content) -> Optional[types.Part]:
    # Only one call per turn is honored
    for part in content.parts:
        if part.function_call and part.function_call.name:
            return part
    return None


class ChefAgent:
    """Drives the function-calling dialogue with the chat model."""

    def __init__(
        self,
        gemini_client: Optional[genai.Client] = None,
        openai_client: Optional[OpenAI] = None,
        model: Optional[str] = None,
        max_turns: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self._gemini = gemini_client
        self._openai = openai_client
        self.model = model or config.GEMINI_MODEL
        self.max_turns = max_turns or config.AGENT_MAX_TURNS
        self.temperature = config.AGENT_TEMPERATURE if temperature is None else temperature

    @property
    def gemini(self) -> genai.Client:
        return self._gemini or get_gemini_client()

    @property
    def openai(self) -> OpenAI:
        return self._openai or get_openai_client()

    def chat_with_user(self, conversation: Conversation, message: str, context: FunctionContext) -> ChatReply:
        """
        Runs one user turn to completion.

        The model may request functions any number of times before answering
        with text. The conversation only gets the user message and the final
        answer appended when the whole turn succeeds; on any failure it is left
        untouched and a generic apology is returned instead.

        Raises:
            ConversationBusyError: another turn is running on ``conversation``.
        """
        with conversation.turn():
            try:
                text, recipes = self._run(conversation, message, context)
            except Exception as e:
                logger.exception(f"!!! ERROR in agent loop: {e} !!!")
                return ChatReply(text=CHAT_ERROR_TEXT, error=True)

            conversation.add_turn(message, text)
            return ChatReply(text=text, recipes=recipes)

    def _run(self, conversation: Conversation, message: str, context: FunctionContext) -> tuple[str, Optional[list[RecipeMatch]]]:
        contents = history_to_contents(conversation.history)
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))
        generate_config = types.GenerateContentConfig(
            tools=tools,
            system_instruction=conversation.system_prompt,
            temperature=self.temperature,
        )
        recipes: Optional[list[RecipeMatch]] = None

        for iteration in range(1, self.max_turns + 1):
            logger.debug(f"--- AGENT ITERATION {iteration} ---")
            response = self.gemini.models.generate_content(
                model=self.model,
                contents=contents,
                config=generate_config,
            )

            if not response.candidates:
                raise ProviderResponseError(f"Model returned no candidates: {response.prompt_feedback}")
            candidate = response.candidates[0]
            if not candidate.content or not candidate.content.parts:
                raise ProviderResponseError(f"Model returned an empty response, finish reason: {candidate.finish_reason}")

            call_part = first_function_call_part(candidate.content)
            if call_part is None:
                text = "\n".join(part.text for part in candidate.content.parts if part.text)
                if not text:
                    raise ProviderResponseError("Model returned neither text nor a function call")
                logger.info(f"✅ Agent finished after {iteration} iteration(s)")
                return text, recipes

            contents.append(types.Content(role="model", parts=[call_part]))
            result, tool_response = call_function(call_part.function_call, context)
            contents.append(tool_response)

            if result.recipes is not None:
                recipes = (recipes or []) + result.recipes

        raise ProviderResponseError(f"Maximum iterations ({self.max_turns}) reached")

    def create_recipe(
        self,
        requirements: str,
        profile: Optional[OnboardingProfile] = None,
        preferences: Optional[UserPreferences] = None,
    ) -> str:
        """Drafts a recipe from free-text requirements with the text-only provider."""
        try:
            completion = self.openai.chat.completions.create(
                model=config.OPENAI_CHAT_MODEL,
                messages=[
                    {"role": "system", "content": build_recipe_creation_prompt(profile, preferences)},
                    {"role": "user", "content": requirements},
                ],
            )
            return completion.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"Error creating recipe: {e}")
            return RECIPE_ERROR_TEXT
