#!/usr/bin/env python3
"""
Unit tests for the terminal chat client.
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.chat.chat_client import ChatClient, parse_input, format_packet, is_quit
from client.main_client import ChatTerminalClient
from common.constants import PacketTypes
from common.framing import write_message
from common.protocol_definitions import (
    Packet, encode_packet, create_chat_packet, create_system_packet,
    create_command_packet, create_ping_packet, create_pong_packet
)
from tests.fakes import FakeWriter


class TestParseInput(unittest.TestCase):
    """Test cases for parse_input."""

    def test_plain_text_is_chat(self):
        self.assertEqual(parse_input('  hello there \n'), create_chat_packet('hello there'))

    def test_slash_command_splits_on_first_whitespace(self):
        self.assertEqual(parse_input('/name Alice  Smith'), create_command_packet('name', 'Alice  Smith'))

    def test_command_without_args(self):
        self.assertEqual(parse_input('/who'), create_command_packet('who', ''))

    def test_bare_slash(self):
        self.assertEqual(parse_input('/'), create_command_packet('', ''))

    def test_blank_line_sends_nothing(self):
        self.assertIsNone(parse_input('   \n'))

    def test_is_quit(self):
        self.assertTrue(is_quit(parse_input('/QUIT')))
        self.assertFalse(is_quit(parse_input('quit')))
        self.assertFalse(is_quit(None))


class TestFormatPacket(unittest.TestCase):
    """Test cases for format_packet."""

    def test_chat(self):
        self.assertEqual(format_packet(create_chat_packet('hi', sender='Guest1')), 'Guest1: hi')

    def test_system(self):
        self.assertEqual(format_packet(create_system_packet('Guest1 joined the chat.')),
                         '[SERVER] Guest1 joined the chat.')

    def test_liveness_packets_are_hidden(self):
        self.assertIsNone(format_packet(create_ping_packet()))
        self.assertIsNone(format_packet(create_pong_packet()))

    def test_other_types(self):
        self.assertEqual(format_packet(Packet(type='notice', text='x')), '[notice] x')


class TestChatClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for ChatClient."""

    async def asyncSetUp(self):
        self.lines = []
        self.reader = asyncio.StreamReader()
        self.writer = FakeWriter()
        self.client = ChatClient(self.reader, self.writer, output=self.lines.append)

    async def test_answers_ping_with_pong(self):
        await self.client.handle_packet(create_ping_packet())
        self.assertEqual(self.writer.packets(), [create_pong_packet()])
        self.assertEqual(self.lines, [])

    async def test_send_line(self):
        packet = await self.client.send_line('/name Alice')
        self.assertEqual(packet, create_command_packet('name', 'Alice'))
        self.assertEqual(self.writer.packets(), [packet])

    async def test_send_without_connection(self):
        self.assertFalse(await ChatClient().send_packet(create_chat_packet('hi')))

    async def test_listen_renders_until_eof(self):
        frames = FakeWriter()
        await write_message(frames, encode_packet(create_system_packet('Welcome, Guest1!')))
        await write_message(frames, b'garbage')
        await write_message(frames, encode_packet(create_ping_packet()))
        await write_message(frames, encode_packet(create_chat_packet('hi', sender='Guest2')))
        self.reader.feed_data(bytes(frames.buffer))
        self.reader.feed_eof()

        await asyncio.wait_for(self.client.listen(), timeout=1)

        self.assertEqual(self.lines, ['[SERVER] Welcome, Guest1!', 'Guest2: hi'])
        self.assertEqual([p.type for p in self.writer.packets()], [PacketTypes.PONG])


class TestChatTerminalClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for the interactive input loop."""

    async def test_input_stops_after_quit(self):
        terminal = ChatTerminalClient('127.0.0.1', 7777)
        writer = FakeWriter()
        terminal.chat_client.set_connection(asyncio.StreamReader(), writer)

        queue = asyncio.Queue()
        for line in ('hello\n', '\n', '/quit\n', 'never sent\n'):
            queue.put_nowait(line)

        await asyncio.wait_for(terminal.send_input(queue), timeout=1)

        self.assertEqual(writer.packets(), [create_chat_packet('hello'), create_command_packet('quit', '')])

    async def test_input_stops_at_end_of_input(self):
        terminal = ChatTerminalClient('127.0.0.1', 7777)
        writer = FakeWriter()
        terminal.chat_client.set_connection(asyncio.StreamReader(), writer)

        queue = asyncio.Queue()
        queue.put_nowait('/who\n')
        queue.put_nowait(None)

        await asyncio.wait_for(terminal.send_input(queue), timeout=1)

        self.assertEqual(writer.packets(), [create_command_packet('who', '')])


if __name__ == '__main__':
    unittest.main()
