class CochefError(Exception):
    """Base class for errors raised by the co-chef service."""


class ConfigurationError(CochefError):
    """A required setting (API key, database URL) is missing."""


class EmbeddingError(CochefError):
    """The embedding provider failed or returned an empty vector."""


class RecipeStoreError(CochefError):
    """Storing a recipe failed at some step.

    ``recipe_id`` is set when the top-level row had already been written, and
    ``cleaned_up`` tells whether the written rows were removed again.
    """

    def __init__(self, message: str, recipe_id=None, cleaned_up: bool = False):
        super().__init__(message)
        self.recipe_id = recipe_id
        self.cleaned_up = cleaned_up


class ConversationBusyError(CochefError):
    """Another turn is already running on the same conversation."""


class ProviderResponseError(CochefError):
    """The chat model returned something the agent loop cannot use."""


class SessionUserMismatchError(CochefError):
    """A chat session is already bound to a different user."""
