"""
Supabase Client
===============
Thin wrapper that provides configured Supabase clients for the
persistence gateway.

Uses the service_role key because the backend reads and writes chat
history on behalf of the authenticated user. Every query is scoped by
user_id in the gateway; RLS still protects direct client access.

Two kinds of client:
    get_supabase_client()  cached, table access and token checks only.
    create_auth_client()   fresh per sign-up / sign-in. Signing in on a
                           client swaps its database Authorization header
                           to the user's JWT, so that must never happen on
                           the shared one.
"""

from functools import lru_cache

from supabase import Client, ClientOptions, create_client

from app.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)


def create_auth_client() -> Client:
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_service_key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )
