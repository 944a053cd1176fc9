"""
Runtime configuration for Keygate
Values come from the environment, optionally seeded from a .env file
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


_LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}


class KeygateConfig:
    """Service configuration manager"""
    
    def __init__(self):
        self.db_file = os.getenv('KEYGATE_DB_FILE', 'keys_database.json')
        self.host = os.getenv('KEYGATE_HOST', '0.0.0.0')
        self.port = self._parse_port(os.getenv('KEYGATE_PORT', '3000'))
        self.static_dir = os.getenv('KEYGATE_STATIC_DIR', 'public')
        self.cors_origins = self._parse_origins(os.getenv('KEYGATE_CORS_ORIGINS', '*'))
        self.log_level = self._parse_log_level(os.getenv('KEYGATE_LOG_LEVEL', 'INFO'))
    
    def _parse_port(self, raw: str) -> int:
        """Parse and range-check the bind port"""
        try:
            port = int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"KEYGATE_PORT must be an integer, got {raw!r}")
        
        if not 0 < port < 65536:
            raise ValueError(f"KEYGATE_PORT must be between 1 and 65535, got {port}")
        return port
    
    def _parse_origins(self, raw: str) -> List[str]:
        """Split a comma-separated origin list"""
        origins = [origin.strip() for origin in raw.split(',') if origin.strip()]
        return origins or ['*']
    
    def _parse_log_level(self, raw: str) -> str:
        """Normalize the log level name"""
        level = raw.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"KEYGATE_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {raw!r}")
        return level


# Global configuration instance
settings = KeygateConfig()


def get_db_file() -> str:
    """Get the registry database file path - use this in your services"""
    return settings.db_file


def get_static_dir() -> str:
    """Get the static frontend directory"""
    return settings.static_dir
