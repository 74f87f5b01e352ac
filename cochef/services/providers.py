"""Lazily created clients for the two model providers."""

from functools import lru_cache

from google import genai
from openai import OpenAI

from cochef.core.config import config
from cochef.core.errors import ConfigurationError


@lru_cache(maxsize=1)
def get_gemini_client() -> genai.Client:
    if not config.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY not found")
    return genai.Client(api_key=config.GEMINI_API_KEY)


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAI:
    if not config.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY not found")
    return OpenAI(api_key=config.OPENAI_API_KEY)
