#!/usr/bin/env python3
"""
LAN Chat Relay Server - Main Entry Point

Runs the chat relay: accepts TCP connections, relays chat between all
connected users and drops users that stop answering pings.

Usage:
    python main_server.py

Optional arguments:
    --host HOST                 Bind address (default: 0.0.0.0)
    --port PORT                 TCP port (default: 7777)
    --heartbeat-interval SECS   Seconds between pings (default: 10)
    --heartbeat-timeout SECS    Idle seconds before eviction (default: 30)
    --debug                     Verbose logging
"""

import argparse
import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, HEARTBEAT_INTERVAL, HEARTBEAT_TIMEOUT


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='LAN Chat Relay Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--heartbeat-interval', type=float, default=HEARTBEAT_INTERVAL,
                        help=f'Seconds between pings (default: {HEARTBEAT_INTERVAL})')
    parser.add_argument('--heartbeat-timeout', type=float, default=HEARTBEAT_TIMEOUT,
                        help=f'Idle seconds before a user is dropped (default: {HEARTBEAT_TIMEOUT})')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    from server.main_server import ChatRelayServer
    from server.utils.config import ServerConfig
    from server.utils.logger import logger

    args = parse_args(argv)
    if args.debug:
        logger.set_level(logging.DEBUG)

    try:
        config = ServerConfig(
            host=args.host,
            port=args.port,
            heartbeat_interval=args.heartbeat_interval,
            heartbeat_timeout=args.heartbeat_timeout
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    server = ChatRelayServer(config)
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except Exception as e:
        logger.log_error("server", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
