#!/usr/bin/env python3
"""
LAN Chat Relay Client - Main Entry Point

Terminal client for the chat relay.

Usage:
    python main_client.py [--host HOST] [--port PORT]

Type a line to chat, or a slash command (/help lists them).
"""

import sys
import os
import argparse
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_HOST, DEFAULT_PORT


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='LAN Chat Relay Client')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f'Server host (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    import asyncio
    from client.main_client import ChatTerminalClient
    from client.utils.logger import logger

    args = parse_args(argv)
    if args.debug:
        logger.set_level(logging.DEBUG)

    client = ChatTerminalClient(args.host, args.port)
    try:
        connected = asyncio.run(client.run())
    except KeyboardInterrupt:
        logger.info("Client shutting down...")
        return 0
    return 0 if connected else 1


if __name__ == "__main__":
    sys.exit(main())
