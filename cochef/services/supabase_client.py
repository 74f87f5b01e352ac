from functools import lru_cache

from supabase import Client, create_client

from cochef.core.config import config
from cochef.core.errors import ConfigurationError


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Shared Supabase client, created on first use."""
    url = config.SUPABASE_URL
    key = config.SUPABASE_KEY

    if not url or not key:
        raise ConfigurationError("Supabase URL and Key must be set in .env file")

    return create_client(url, key)
