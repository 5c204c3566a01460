#!/usr/bin/env python3
"""
Unit tests for broadcast fan-out.
"""

import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.protocol_definitions import create_chat_packet, create_system_packet
from server.chat.broadcaster import Broadcaster
from server.session.session_registry import SessionRegistry
from tests.fakes import FakeWriter


class TestBroadcaster(unittest.IsolatedAsyncioTestCase):
    """Test cases for Broadcaster."""

    async def asyncSetUp(self):
        self.registry = SessionRegistry()
        self.broadcaster = Broadcaster(self.registry)

    async def test_every_session_receives_packets_in_order(self):
        writers = [FakeWriter() for _ in range(4)]
        for writer in writers:
            await self.registry.allocate(writer)

        sent = [create_chat_packet(f"message {i}", sender='Guest1') for i in range(5)]
        for packet in sent:
            await self.broadcaster.broadcast(packet)

        for writer in writers:
            self.assertEqual(writer.packets(), sent)

    async def test_failing_recipient_does_not_stop_delivery(self):
        good_before = FakeWriter()
        broken = FakeWriter(fail=True)
        good_after = FakeWriter()
        await self.registry.allocate(good_before)
        broken_session = await self.registry.allocate(broken)
        await self.registry.allocate(good_after)

        packet = create_system_packet('hello')
        await self.broadcaster.broadcast(packet)

        self.assertEqual(good_before.packets(), [packet])
        self.assertEqual(good_after.packets(), [packet])
        # Removal is the read loop's job
        self.assertIs(await self.registry.get(broken_session.id), broken_session)

    async def test_exclude_uid(self):
        a = FakeWriter()
        b = FakeWriter()
        session_a = await self.registry.allocate(a)
        await self.registry.allocate(b)

        await self.broadcaster.broadcast(create_system_packet('joined'), exclude_uid=session_a.id)

        self.assertEqual(a.packets(), [])
        self.assertEqual(len(b.packets()), 1)

    async def test_send_reports_failure(self):
        ok = await self.registry.allocate(FakeWriter())
        broken = await self.registry.allocate(FakeWriter(fail=True))
        self.assertTrue(await self.broadcaster.send(ok, create_system_packet('x')))
        self.assertFalse(await self.broadcaster.send(broken, create_system_packet('x')))

    async def test_backlogged_recipient_is_aborted(self):
        """A peer that stopped reading is dropped without holding up the rest."""
        broadcaster = Broadcaster(self.registry, send_buffer_limit=100)
        stalled = FakeWriter()
        stalled.transport.buffered = 101
        healthy = FakeWriter()
        await self.registry.allocate(stalled)
        await self.registry.allocate(healthy)

        packet = create_chat_packet('hello', sender='Guest2')
        await broadcaster.broadcast(packet)

        self.assertTrue(stalled.transport.aborted)
        self.assertEqual(stalled.packets(), [])
        self.assertEqual(healthy.packets(), [packet])

    async def test_backlog_at_limit_is_kept(self):
        broadcaster = Broadcaster(self.registry, send_buffer_limit=100)
        writer = FakeWriter()
        writer.transport.buffered = 100
        session = await self.registry.allocate(writer)

        self.assertTrue(await broadcaster.send(session, create_system_packet('x')))
        self.assertFalse(writer.transport.aborted)

    async def test_closing_session_is_skipped(self):
        writer = FakeWriter()
        session = await self.registry.allocate(writer)
        writer.close()

        self.assertFalse(await self.broadcaster.send(session, create_system_packet('x')))
        self.assertEqual(writer.packets(), [])

    async def test_empty_registry(self):
        await self.broadcaster.broadcast(create_system_packet('nobody here'))


if __name__ == '__main__':
    unittest.main()
