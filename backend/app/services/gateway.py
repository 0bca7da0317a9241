"""
Persistence & Auth Gateway
==========================
The only module that talks to Supabase. Routers and services go through
``SupabaseGateway`` and get back pydantic models, never raw rows.

Tables:
    users       id, name, email, created_at, last_active
    messages    id, user_id, text, sender, mood (jsonb), timestamp
    sessions    id, user_id, mood, preview, message_count, timestamp
    mood_logs   id, user_id, mood, emoji, notes, timestamp

Passwords and tokens are owned by Supabase Auth. This service never sees
a password hash and never mints a token itself.
Sign-up and sign-in go through a fresh client from create_auth_client();
the shared client only touches tables and verifies tokens.

Failure policy:
    - Any store/network error surfaces as ``PersistenceFailure``. The
      caller decides whether to retry or show an error.
    - Auth problems raise their own exceptions (DuplicateEmailError,
      InvalidCredentialsError, InvalidTokenError, UserNotFoundError) so
      routers can map them to 4xx without string matching.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pandas as pd
from supabase import Client

from app.db.supabase import create_auth_client, get_supabase_client
from app.models.message import Message, Sender
from app.models.mood import DEFAULT_MOOD_COLOR, MoodLog, MoodStats, MoodTag
from app.models.session import ChatSession
from app.models.user import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PersistenceFailure(Exception):
    """The store could not complete a read or write."""


class DuplicateEmailError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


class InvalidTokenError(Exception):
    pass


class UserNotFoundError(Exception):
    pass


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _to_user(row: dict) -> User:
    return User(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        created_at=row.get("created_at"),
        last_active=row.get("last_active"),
    )


def _to_mood_tag(raw: Optional[dict]) -> Optional[MoodTag]:
    if not raw:
        return None
    # Older rows stored the label under "mood".
    label = raw.get("label") or raw.get("mood")
    if not label:
        return None
    return MoodTag(
        label=label,
        emoji=raw.get("emoji") or "",
        color=raw.get("color") or DEFAULT_MOOD_COLOR,
    )


def _to_message(row: dict) -> Message:
    return Message(
        id=str(row["id"]),
        text=row["text"],
        sender=Sender(row["sender"]),
        timestamp=row["timestamp"],
        mood=_to_mood_tag(row.get("mood")),
    )


def _to_session(row: dict) -> ChatSession:
    return ChatSession(
        id=str(row["id"]),
        mood=row["mood"],
        preview=row.get("preview"),
        message_count=int(row.get("message_count") or 0),
        timestamp=row["timestamp"],
    )


def _to_mood_log(row: dict) -> MoodLog:
    return MoodLog(
        id=str(row["id"]),
        mood=row["mood"],
        emoji=row.get("emoji"),
        notes=row.get("notes"),
        timestamp=row["timestamp"],
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class SupabaseGateway:
    """CRUD over the chat tables plus Supabase Auth sign-up / sign-in."""

    def __init__(
        self,
        client: Client | None = None,
        auth_client_factory: Callable[[], Client] | None = None,
    ) -> None:
        self._db = client or get_supabase_client()
        # Sign-up and sign-in run on a throwaway client each time.
        self._auth_client_factory = auth_client_factory or create_auth_client

    def _execute(self, action: str, query: Any) -> Any:
        try:
            return query.execute()
        except Exception as exc:
            logger.exception("Supabase call failed: %s", action)
            raise PersistenceFailure(f"Failed to {action}") from exc

    @staticmethod
    def _first_row(result: Any) -> Optional[dict]:
        if result is None or not result.data:
            return None
        data = result.data
        return data[0] if isinstance(data, list) else data

    # ------------------------------------------------------------------
    # Users & auth
    # ------------------------------------------------------------------

    async def get_user(self, user_id: str) -> User:
        result = self._execute(
            "fetch user profile",
            self._db.table("users").select("*").eq("id", user_id).limit(1),
        )
        row = self._first_row(result)
        if row is None:
            raise UserNotFoundError(user_id)
        return _to_user(row)

    async def create_user(self, name: str, email: str, password: str) -> tuple[User, Optional[str]]:
        """Register with Supabase Auth and create the profile row.

        Returns the profile and an access token. The token is None when the
        project requires email confirmation before the first sign-in.
        """
        existing = self._execute(
            "check existing email",
            self._db.table("users").select("id").eq("email", email).limit(1),
        )
        if self._first_row(existing) is not None:
            raise DuplicateEmailError(email)

        try:
            auth_response = self._auth_client_factory().auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name}},
            })
        except Exception as exc:
            if "already" in str(exc).lower():
                raise DuplicateEmailError(email) from exc
            logger.exception("Supabase sign-up failed")
            raise PersistenceFailure("Failed to register user") from exc

        if not auth_response or not auth_response.user:
            raise PersistenceFailure("Sign-up returned no user")

        now = _now().isoformat()
        result = self._execute(
            "create user profile",
            self._db.table("users").insert({
                "id": auth_response.user.id,
                "name": name,
                "email": email,
                "created_at": now,
                "last_active": now,
            }),
        )
        row = self._first_row(result)
        if row is None:
            raise PersistenceFailure("Profile insert returned no row")

        session = auth_response.session
        token = session.access_token if session else None

        logger.info("Registered user %s", row["id"])
        return _to_user(row), token

    async def verify_credentials(self, email: str, password: str) -> tuple[User, str]:
        """Sign in and bump last_active. Returns the profile and access token."""
        try:
            auth_response = self._auth_client_factory().auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as exc:
            logger.warning("Sign-in rejected: %s", exc)
            raise InvalidCredentialsError(email) from exc

        if not auth_response or not auth_response.user or not auth_response.session:
            raise InvalidCredentialsError(email)

        user_id = auth_response.user.id
        result = self._execute(
            "update last_active",
            self._db.table("users").update({"last_active": _now().isoformat()}).eq("id", user_id),
        )
        row = self._first_row(result)
        if row is None:
            raise UserNotFoundError(user_id)

        logger.info("User %s signed in", user_id)
        return _to_user(row), auth_response.session.access_token

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to the user's profile."""
        try:
            auth_response = self._db.auth.get_user(token)
        except Exception as exc:
            logger.warning("Auth token verification failed: %s", exc)
            raise InvalidTokenError() from exc

        if not auth_response or not auth_response.user:
            raise InvalidTokenError()

        return await self.get_user(auth_response.user.id)

    async def update_profile(self, user_id: str, name: str) -> User:
        result = self._execute(
            "update profile",
            self._db.table("users").update({"name": name}).eq("id", user_id),
        )
        row = self._first_row(result)
        if row is None:
            raise UserNotFoundError(user_id)
        return _to_user(row)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def append_message(
        self,
        user_id: str,
        text: str,
        sender: Sender,
        mood: Optional[MoodTag] = None,
    ) -> Message:
        result = self._execute(
            "save message",
            self._db.table("messages").insert({
                "user_id": user_id,
                "text": text,
                "sender": sender.value,
                "mood": mood.model_dump() if mood else None,
                "timestamp": _now().isoformat(),
            }),
        )
        row = self._first_row(result)
        if row is None:
            raise PersistenceFailure("Message insert returned no row")
        return _to_message(row)

    async def list_messages(
        self,
        user_id: str,
        limit: int,
        sender: Optional[Sender] = None,
    ) -> list[Message]:
        """The most recent *limit* messages, oldest first, optionally from one sender."""
        query = self._db.table("messages").select("*").eq("user_id", user_id)
        if sender is not None:
            query = query.eq("sender", sender.value)
        result = self._execute(
            "fetch messages",
            query.order("timestamp", desc=True).limit(limit),
        )
        rows = list(reversed(result.data or []))
        return [_to_message(row) for row in rows]

    async def delete_all_messages(self, user_id: str) -> None:
        self._execute(
            "delete messages",
            self._db.table("messages").delete().eq("user_id", user_id),
        )
        logger.info("Deleted chat history for user %s", user_id)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def list_sessions(self, user_id: str, limit: int) -> list[ChatSession]:
        """Newest first."""
        result = self._execute(
            "fetch sessions",
            self._db.table("sessions")
            .select("*")
            .eq("user_id", user_id)
            .order("timestamp", desc=True)
            .limit(limit),
        )
        return [_to_session(row) for row in (result.data or [])]

    async def create_session(self, user_id: str, mood: str, preview: Optional[str]) -> ChatSession:
        result = self._execute(
            "create session",
            self._db.table("sessions").insert({
                "user_id": user_id,
                "mood": mood,
                "preview": preview,
                "message_count": 1,
                "timestamp": _now().isoformat(),
            }),
        )
        row = self._first_row(result)
        if row is None:
            raise PersistenceFailure("Session insert returned no row")
        return _to_session(row)

    # ------------------------------------------------------------------
    # Mood logs
    # ------------------------------------------------------------------

    async def append_mood_log(
        self,
        user_id: str,
        mood: str,
        emoji: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MoodLog:
        result = self._execute(
            "log mood",
            self._db.table("mood_logs").insert({
                "user_id": user_id,
                "mood": mood,
                "emoji": emoji,
                "notes": notes,
                "timestamp": _now().isoformat(),
            }),
        )
        row = self._first_row(result)
        if row is None:
            raise PersistenceFailure("Mood log insert returned no row")
        return _to_mood_log(row)

    async def list_mood_logs(self, user_id: str, window_days: int) -> list[MoodLog]:
        """Mood logs from the last *window_days* days, newest first."""
        since = (_now() - timedelta(days=window_days)).isoformat()
        result = self._execute(
            "fetch mood logs",
            self._db.table("mood_logs")
            .select("*")
            .eq("user_id", user_id)
            .gte("timestamp", since)
            .order("timestamp", desc=True),
        )
        return [_to_mood_log(row) for row in (result.data or [])]

    async def mood_stats(self, user_id: str, window_days: int) -> MoodStats:
        """Per-label counts and percentages over the last *window_days* days."""
        since = (_now() - timedelta(days=window_days)).isoformat()
        result = self._execute(
            "fetch mood stats",
            self._db.table("mood_logs")
            .select("mood")
            .eq("user_id", user_id)
            .gte("timestamp", since),
        )
        rows = result.data or []
        period = f"{window_days} days"

        if not rows:
            return MoodStats(total_logs=0, counts={}, percentages={}, period=period)

        counts = pd.DataFrame(rows)["mood"].value_counts()
        total = int(counts.sum())

        return MoodStats(
            total_logs=total,
            counts={str(label): int(n) for label, n in counts.items()},
            percentages={str(label): round(float(n) / total * 100, 2) for label, n in counts.items()},
            period=period,
        )


def get_gateway() -> SupabaseGateway:
    """FastAPI dependency. A fresh gateway per request over the cached client."""
    return SupabaseGateway()
