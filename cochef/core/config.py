"""Configuration for the co-chef service.

Values come from the process environment, falling back to a local .env file
and then to the defaults below.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        # Conversational provider (function calling)
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        # Text-only provider: embeddings, categorization, recipe drafting
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_CHAT_MODEL: str = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
        self.EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
        # Hosted database
        self.SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL") or None
        self.SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_SERVICE_KEY") or None
        # Similarity search defaults
        self.SEARCH_MATCH_THRESHOLD: float = float(os.getenv("SEARCH_MATCH_THRESHOLD", "0.4"))
        self.SEARCH_MATCH_COUNT: int = int(os.getenv("SEARCH_MATCH_COUNT", "7"))
        # "swedish" expands query word endings, "none" searches the lowercased query as is
        self.SEARCH_QUERY_EXPANSION: str = os.getenv("SEARCH_QUERY_EXPANSION", "swedish").lower()
        # Agent loop
        self.AGENT_MAX_TURNS: int = int(os.getenv("AGENT_MAX_TURNS", "10"))
        self.AGENT_TEMPERATURE: float = float(os.getenv("AGENT_TEMPERATURE", "0.7"))
        # Chat sessions kept in memory; the least recently used one is dropped beyond this
        self.SESSION_MAX_COUNT: int = int(os.getenv("SESSION_MAX_COUNT", "1000"))
        # Delete already written rows when a recipe store fails half way
        self.STORE_CLEANUP_ON_FAILURE: bool = _as_bool(os.getenv("STORE_CLEANUP_ON_FAILURE", "true"))
        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_TYPE: str = os.getenv("LOG_TYPE", "text").lower()

    def validate(self) -> None:
        """Raise ValueError for settings outside their allowed range."""
        if not 0.0 <= self.SEARCH_MATCH_THRESHOLD <= 1.0:
            raise ValueError(f"SEARCH_MATCH_THRESHOLD must be between 0 and 1, got {self.SEARCH_MATCH_THRESHOLD}")
        if self.SEARCH_MATCH_COUNT < 1:
            raise ValueError(f"SEARCH_MATCH_COUNT must be at least 1, got {self.SEARCH_MATCH_COUNT}")
        if self.SEARCH_QUERY_EXPANSION not in ("swedish", "none"):
            raise ValueError(f"SEARCH_QUERY_EXPANSION must be 'swedish' or 'none', got {self.SEARCH_QUERY_EXPANSION}")
        if self.AGENT_MAX_TURNS < 1:
            raise ValueError(f"AGENT_MAX_TURNS must be at least 1, got {self.AGENT_MAX_TURNS}")
        if self.SESSION_MAX_COUNT < 1:
            raise ValueError(f"SESSION_MAX_COUNT must be at least 1, got {self.SESSION_MAX_COUNT}")
        if self.LOG_TYPE not in ("text", "json"):
            raise ValueError(f"LOG_TYPE must be 'text' or 'json', got {self.LOG_TYPE}")


config = Config()
