"""
Broadcast module.

Fans packets out to every connected session. Frames are queued on each
session's transport without waiting for it to drain, so a recipient that
stops reading never holds up the others. A session whose unsent backlog
passes SEND_BUFFER_LIMIT is aborted; its connection handler then cleans up.
"""

from typing import Optional

from common.constants import SEND_BUFFER_LIMIT
from common.framing import frame_message
from common.protocol_definitions import Packet, encode_packet
from server.session.session_registry import Session, SessionRegistry
from server.utils.logger import logger


class Broadcaster:
    """Server-side packet fan-out."""

    def __init__(self, registry: SessionRegistry, send_buffer_limit: int = SEND_BUFFER_LIMIT):
        self.registry = registry
        self.send_buffer_limit = send_buffer_limit

    async def broadcast(self, packet: Packet, exclude_uid: Optional[int] = None):
        """
        Send a packet to all connected sessions.
        Optionally exclude a specific session by uid.
        """
        frame = frame_message(encode_packet(packet))
        recipients = await self.registry.snapshot()

        logger.debug(f"[BROADCAST] type={packet.type} to {len(recipients)} sessions, exclude_uid={exclude_uid}")

        for session in recipients:
            if exclude_uid is not None and session.id == exclude_uid:
                continue
            self._deliver(session, frame)

    async def send(self, session: Session, packet: Packet) -> bool:
        """Send a packet to a single session."""
        return self._deliver(session, frame_message(encode_packet(packet)))

    def _deliver(self, session: Session, frame: bytes) -> bool:
        writer = session.writer
        try:
            if writer.is_closing():
                return False

            backlog = writer.transport.get_write_buffer_size()
            if backlog > self.send_buffer_limit:
                logger.warning(f"Dropping uid={session.id}: {backlog} bytes unsent")
                session.close(force=True)
                return False

            writer.write(frame)
            return True
        except Exception as e:
            # Leave the session in place; its read loop notices the disconnect.
            logger.debug(f"Failed to send to uid={session.id}: {e}")
            return False
