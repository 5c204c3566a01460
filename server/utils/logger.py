"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging


class ServerLogger:
    """Server logging class."""
    
    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chat_relay_server')
        self.logger.setLevel(log_level)
        
        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        
        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        
        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)
        
        # Add handler to logger
        self.logger.addHandler(console_handler)
    
    def set_level(self, log_level: int):
        """Change the logging threshold."""
        self.logger.setLevel(log_level)
    
    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)
    
    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)
    
    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)
    
    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)
    
    def log_connection(self, addr: tuple, uid: int):
        """Log client connection."""
        self.info(f"New connection from {addr}, assigned uid={uid}")
    
    def log_disconnect(self, username: str, uid: int):
        """Log client disconnect."""
        self.info(f"User {username} (uid={uid}) disconnected")
    
    def log_chat(self, username: str, uid: int, message: str):
        """Log chat message."""
        self.info(f"Chat from {username} (uid={uid}): {message}")
    
    def log_rename(self, old_username: str, new_username: str, uid: int):
        """Log username change."""
        self.info(f"User {old_username} (uid={uid}) is now '{new_username}'")
    
    def log_eviction(self, username: str, uid: int, idle_seconds: float):
        """Log heartbeat eviction."""
        self.warning(f"Evicting {username} (uid={uid}): no traffic for {idle_seconds:.1f}s")
    
    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
