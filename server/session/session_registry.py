"""
Session registry module.

Tracks every connected participant by a server-assigned id. The registry is
created once by the server and handed to each component that needs it.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from common.constants import GUEST_NAME_PREFIX
from server.utils.logger import logger


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """
    Per-connection state, kept only in memory.

    The writer is owned by the session. Closing it is what ends the
    connection handler's read loop, which then removes the session.
    """
    id: int
    writer: asyncio.StreamWriter
    username: str
    address: Optional[tuple] = None
    connected_at: datetime = field(default_factory=utc_now)
    last_seen: datetime = field(default_factory=utc_now)

    def touch(self, now: Optional[datetime] = None):
        """Record inbound traffic."""
        self.last_seen = now or utc_now()

    def idle_seconds(self, now: Optional[datetime] = None) -> float:
        return ((now or utc_now()) - self.last_seen).total_seconds()

    def close(self, force: bool = False):
        """
        Close the connection. Safe to call more than once.

        force=True aborts the transport without flushing buffered output,
        for peers that have stopped reading.
        """
        try:
            if force:
                self.writer.transport.abort()
            elif not self.writer.is_closing():
                self.writer.close()
        except Exception as e:
            logger.debug(f"Error closing connection for uid={self.id}: {e}")


class SessionRegistry:
    """Concurrent directory of connected sessions keyed by id."""

    def __init__(self):
        self.sessions: Dict[int, Session] = {}
        self._ids = itertools.count(1)  # never reset, so ids are never reused
        self.lock = asyncio.Lock()  # Protect shared state

    async def allocate(self, writer: asyncio.StreamWriter, address: Optional[tuple] = None) -> Session:
        """Create, register and return a session with the next id."""
        async with self.lock:
            uid = next(self._ids)
            session = Session(
                id=uid,
                writer=writer,
                username=f"{GUEST_NAME_PREFIX}{uid}",
                address=address
            )
            self.sessions[uid] = session
        return session

    async def remove(self, uid: int) -> Optional[Session]:
        """Drop a session if present; returns it, or None if it was already gone."""
        async with self.lock:
            return self.sessions.pop(uid, None)

    async def get(self, uid: int) -> Optional[Session]:
        async with self.lock:
            return self.sessions.get(uid)

    async def snapshot(self) -> List[Session]:
        """Point-in-time copy, safe to iterate while others register or leave."""
        async with self.lock:
            return list(self.sessions.values())

    async def usernames(self) -> List[str]:
        return [session.username for session in await self.snapshot()]

    async def count(self) -> int:
        async with self.lock:
            return len(self.sessions)
