#!/usr/bin/env python3
"""
LAN Chat Relay Client - Main Entry Point

Connects to the relay, sends each typed line and prints what the server
relays back.
"""

import asyncio
import socket
import sys
import os
import threading
from typing import Optional

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from client.chat.chat_client import ChatClient, is_quit
from client.utils.config import ClientConfig
from client.utils.logger import logger


class ChatTerminalClient:
    """Interactive terminal client."""

    def __init__(self, host: str = 'localhost', port: int = 7777):
        self.config = ClientConfig(host, port)
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.chat_client = ChatClient()

    async def connect(self) -> bool:
        """Establish connection to the server with retry logic and exponential backoff."""
        delay = self.config.connect_retry_delay

        for attempt in range(1, self.config.connect_attempts + 1):
            try:
                self.reader, self.writer = await asyncio.open_connection(self.config.host, self.config.port)
            except OSError as e:
                logger.log_connection(self.config.host, self.config.port, False)
                logger.log_error("connection", e)
                if attempt < self.config.connect_attempts:
                    logger.info(f"Retrying connection in {delay}s (attempt {attempt}/{self.config.connect_attempts})...")
                    await asyncio.sleep(delay)
                    delay *= 2
                continue

            sock = self.writer.get_extra_info('socket')
            if sock is not None:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

            logger.log_connection(self.config.host, self.config.port, True)
            self.chat_client.set_connection(self.reader, self.writer)
            return True

        logger.error(f"Failed to connect after {self.config.connect_attempts} attempts")
        return False

    def _start_input_thread(self, queue: asyncio.Queue):
        """Read stdin on a daemon thread so a blocked read never holds up exit."""
        loop = asyncio.get_running_loop()

        def pump():
            for line in sys.stdin:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, None)

        threading.Thread(target=pump, name='stdin-reader', daemon=True).start()

    async def send_input(self, queue: asyncio.Queue):
        """Send typed lines until /quit or end of input."""
        while True:
            line = await queue.get()
            if line is None:
                break
            packet = await self.chat_client.send_line(line)
            if is_quit(packet):
                break

    async def run(self):
        """Run until the user quits or the server goes away."""
        if not await self.connect():
            return False

        queue: asyncio.Queue = asyncio.Queue()
        self._start_input_thread(queue)

        listener = asyncio.create_task(self.chat_client.listen())
        sender = asyncio.create_task(self.send_input(queue))

        try:
            _, pending = await asyncio.wait({listener, sender}, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        finally:
            await self.close()
        return True

    async def close(self):
        if self.writer is None:
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error while closing connection: {e}")
        self.writer = None
