# authx/supabase_client.py
# Supabase client for auth-server lookups (user directory, session checks)

import logging

from django.conf import settings
from supabase import create_client

logger = logging.getLogger("devfest.authx")

_supabase_client = None


def get_supabase_client():
    """
    Get the Supabase client instance (singleton pattern).
    Uses service_role key for admin access to the user directory.
    Returns None when credentials are not configured.
    """
    global _supabase_client

    if _supabase_client is None:
        url = settings.SUPABASE_URL
        key = settings.SUPABASE_SERVICE_ROLE_KEY

        if not url or not key:
            logger.warning("Supabase credentials not configured")
            return None

        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client
