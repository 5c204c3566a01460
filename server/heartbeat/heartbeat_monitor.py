"""
Heartbeat monitor module.

Pings every session on a fixed interval and closes the connection of any
session that has been silent for longer than the timeout. Removal and the
departure announcement are left to the session's connection handler.
"""

import asyncio
from datetime import datetime
from typing import List, Optional

from common.protocol_definitions import create_ping_packet
from server.chat.broadcaster import Broadcaster
from server.session.session_registry import Session, SessionRegistry, utc_now
from server.utils.logger import logger


class HeartbeatMonitor:
    """Server-side liveness checks."""

    def __init__(self, registry: SessionRegistry, broadcaster: Broadcaster,
                 interval: float, timeout: float):
        self.registry = registry
        self.broadcaster = broadcaster
        self.interval = interval
        self.timeout = timeout
        self.task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """Run the monitor as a background task."""
        if self.task is None or self.task.done():
            self.task = asyncio.create_task(self.run(), name='heartbeat-monitor')
        return self.task

    async def stop(self):
        """Cancel the background task and wait for it to finish."""
        if self.task is None:
            return
        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        self.task = None

    async def run(self):
        logger.info(f"Heartbeat monitor started (interval={self.interval}s, timeout={self.timeout}s)")
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception as e:
                logger.log_error("heartbeat", e)

    async def tick(self):
        """One heartbeat cycle: ping everyone, then evict the silent."""
        try:
            await self.broadcaster.broadcast(create_ping_packet())
        finally:
            await self.evict_stale()

    async def evict_stale(self, now: Optional[datetime] = None) -> List[Session]:
        """Abort every session idle for longer than the timeout."""
        now = now or utc_now()
        evicted = []

        for session in await self.registry.snapshot():
            idle = session.idle_seconds(now)
            if idle > self.timeout:
                logger.log_eviction(session.username, session.id, idle)
                session.close(force=True)
                evicted.append(session)

        return evicted
