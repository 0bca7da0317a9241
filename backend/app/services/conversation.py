"""
Conversation Service
====================
Per-request chat state and deferred bot replies.

``ChatContext`` bundles everything a chat handler needs (the signed-in
user, the persistence gateway, the response selector and the reply
scheduler). Routers receive it through a FastAPI dependency instead of
reaching for module globals, and tests build one directly with fakes.

``ReplyScheduler`` implements the "typing" pause before a bot reply is
stored. For a given user, replies land in the order they were requested
even when the pauses overlap: a second message sent while the first reply
is still pending waits for that reply before its own is stored. Nothing
is dropped. The only cancellation is explicit, when the user wipes their
history.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from app.config import Settings, get_settings
from app.models.message import Message, Sender
from app.services.gateway import SupabaseGateway
from app.services.responder import Category, ResponseSelector

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Reply scheduler
# ---------------------------------------------------------------------------

class ReplyScheduler:
    """Runs reply callbacks after a delay, in causal order per user."""

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay = delay_seconds
        self._tails: dict[str, asyncio.Task] = {}
        self._pending: dict[str, set[asyncio.Task]] = defaultdict(set)

    def pending_count(self, user_id: str) -> int:
        return len(self._pending.get(user_id, ()))

    async def deliver(self, user_id: str, reply: Callable[[], Awaitable[T]]) -> Optional[T]:
        """Wait out the typing delay, then run *reply* after any earlier one.

        Returns the reply's result, or None if it was cancelled by
        ``cancel_pending`` before it ran.
        """
        previous = self._tails.get(user_id)
        task = asyncio.ensure_future(self._run(previous, reply))
        self._tails[user_id] = task
        self._pending[user_id].add(task)
        task.add_done_callback(lambda t: self._forget(user_id, t))

        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def _run(self, previous: Optional[asyncio.Task], reply: Callable[[], Awaitable[T]]) -> T:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        if previous is not None and not previous.done():
            # Ordering only. The earlier reply's outcome is its own caller's.
            await asyncio.wait({previous})
        return await reply()

    def cancel_pending(self, user_id: str) -> int:
        """Cancel every reply still waiting for *user_id*. Returns how many."""
        tasks = [t for t in self._pending.get(user_id, ()) if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info("Cancelled %d pending replies for user %s", len(tasks), user_id)
        return len(tasks)

    def _forget(self, user_id: str, task: asyncio.Task) -> None:
        pending = self._pending.get(user_id)
        if pending is not None:
            pending.discard(task)
            if not pending:
                del self._pending[user_id]
        if self._tails.get(user_id) is task:
            del self._tails[user_id]


_default_scheduler: ReplyScheduler | None = None


def get_reply_scheduler() -> ReplyScheduler:
    global _default_scheduler
    if _default_scheduler is None:
        _default_scheduler = ReplyScheduler(get_settings().reply_delay_seconds)
    return _default_scheduler


# ---------------------------------------------------------------------------
# Chat context
# ---------------------------------------------------------------------------

@dataclass
class ChatContext:
    user_id: str
    gateway: SupabaseGateway
    selector: ResponseSelector
    scheduler: ReplyScheduler
    settings: Settings

    async def reply_to(self, text: str) -> Optional[tuple[Category, Message]]:
        """Classify *text*, pick a canned reply and store it as a bot message.

        Returns None when the pending reply was cancelled by a history wipe.
        """
        category, response = self.selector.respond(text)

        async def _store() -> Message:
            return await self.gateway.append_message(self.user_id, response, Sender.BOT)

        message = await self.scheduler.deliver(self.user_id, _store)
        if message is None:
            return None
        return category, message

    async def clear_history(self) -> None:
        self.scheduler.cancel_pending(self.user_id)
        await self.gateway.delete_all_messages(self.user_id)
