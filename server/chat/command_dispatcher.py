"""
Command dispatcher module.

Interprets slash commands sent as command packets. Replies go to the
issuing session only; a rename is the one command that is broadcast.
"""

from common.constants import Commands, HELP_TEXT
from common.protocol_definitions import Packet, create_system_packet
from server.chat.broadcaster import Broadcaster
from server.session.session_registry import Session, SessionRegistry
from server.utils.logger import logger


class CommandDispatcher:
    """Server-side command handling."""

    def __init__(self, registry: SessionRegistry, broadcaster: Broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster
        self.handlers = {
            Commands.NAME: self.handle_name,
            Commands.WHO: self.handle_who,
            Commands.HELP: self.handle_help,
            Commands.QUIT: self.handle_quit,
        }

    async def dispatch(self, session: Session, packet: Packet):
        """Route a command packet to its handler by case-insensitive name."""
        name = (packet.name or '').strip().lower()
        args = packet.args or ''

        logger.debug(f"Command /{name} from uid={session.id}")

        handler = self.handlers.get(name)
        if handler is None:
            await self.reply(session, f"Unknown command: /{name}. Type /help for a list of commands.")
            return

        await handler(session, args)

    async def reply(self, session: Session, text: str):
        await self.broadcaster.send(session, create_system_packet(text))

    async def handle_name(self, session: Session, args: str):
        """/name <newname>"""
        new_username = args.strip()
        if not new_username:
            await self.reply(session, "Usage: /name <newname>")
            return

        old_username = session.username
        session.username = new_username

        logger.log_rename(old_username, new_username, session.id)
        await self.broadcaster.broadcast(create_system_packet(f"{old_username} is now known as {new_username}."))

    async def handle_who(self, session: Session, args: str):
        """/who -> comma-separated list of connected usernames."""
        usernames = await self.registry.usernames()
        await self.reply(session, ', '.join(usernames))

    async def handle_help(self, session: Session, args: str):
        await self.reply(session, HELP_TEXT)

    async def handle_quit(self, session: Session, args: str):
        """
        /quit

        Only closes the connection. The connection handler's teardown
        removes the session and announces the departure.
        """
        logger.info(f"Quit requested by uid={session.id}")
        session.close()
