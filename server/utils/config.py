"""
Server configuration module.

This module handles server-side configuration settings.
"""

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_MESSAGE_SIZE,
    HEARTBEAT_INTERVAL, HEARTBEAT_TIMEOUT
)


class ServerConfig:
    """Server configuration class."""
    
    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 heartbeat_interval: float = HEARTBEAT_INTERVAL,
                 heartbeat_timeout: float = HEARTBEAT_TIMEOUT):
        self.host = host
        self.port = port
        
        # Framing settings
        self.max_message_size = MAX_MESSAGE_SIZE
        
        # Connection settings
        self.heartbeat_interval = heartbeat_interval
        self.heartbeat_timeout = heartbeat_timeout
        
        self.validate()
    
    def validate(self):
        """Reject settings the server cannot run with."""
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.heartbeat_interval <= 0:
            raise ValueError("Heartbeat interval must be positive")
        # A live client may miss one ping without being evicted
        if self.heartbeat_timeout < 2 * self.heartbeat_interval:
            raise ValueError(
                f"Heartbeat timeout ({self.heartbeat_timeout}s) must be at least twice "
                f"the interval ({self.heartbeat_interval}s)"
            )
    
    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
    
    def get_heartbeat_settings(self):
        """Get heartbeat settings."""
        return {
            'interval': self.heartbeat_interval,
            'timeout': self.heartbeat_timeout
        }
