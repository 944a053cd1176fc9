"""
Configuration for Keygate
"""

from .settings import KeygateConfig, settings, get_db_file, get_static_dir

__all__ = ['KeygateConfig', 'settings', 'get_db_file', 'get_static_dir']
