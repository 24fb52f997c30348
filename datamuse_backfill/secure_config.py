#!/usr/bin/env python3
"""
Secure Configuration Management for the Datamuse backfill
Supports environment variables, a JSON config file, and development defaults
"""

import os
import json
import logging
from typing import Optional
from pathlib import Path
from dataclasses import dataclass

from psycopg.conninfo import make_conninfo

logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Database configuration with validation"""
    host: str
    port: int
    database: str
    user: str
    password: str
    schema: str = 'public'
    pool_size: int = 10
    timeout: int = 30

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.host:
            raise ValueError("Database host is required")
        if not self.user:
            raise ValueError("Database user is required")
        if not self.password:
            raise ValueError("Database password is required")
        if not (1 <= self.port <= 65535):
            raise ValueError("Database port must be between 1 and 65535")
        if self.pool_size < 1:
            raise ValueError("Database pool size must be at least 1")

    def get_connection_string(self, hide_password: bool = True) -> str:
        """Get a libpq connection string; values are quoted by psycopg"""
        params = {
            'host': self.host,
            'port': self.port,
            'dbname': self.database,
            'user': self.user,
            'password': "***" if hide_password else self.password,
        }
        if self.schema:
            params['options'] = f'-c search_path={self.schema}'
        return make_conninfo(**params)


class SecureConfigManager:
    """Secure configuration manager with environment variable support"""

    REQUIRED_ENV_VARS = ('DB_HOST', 'DB_USER', 'DB_PASSWORD', 'DB_NAME')

    def __init__(self, config_file: Optional[Path] = None):
        self._db_config: Optional[DatabaseConfig] = None
        self._config_file = config_file or Path.cwd() / 'config.json'

    def get_database_config(self) -> DatabaseConfig:
        """
        Get database configuration from multiple sources in priority order:
        1. Environment variables
        2. config.json file
        3. Default values (development only)
        """
        if self._db_config is None:
            self._db_config = self._load_database_config()

        return self._db_config

    def _load_database_config(self) -> DatabaseConfig:
        """Load database configuration from available sources"""

        if self._has_env_config():
            logger.info("Loading database config from environment variables")
            return self._load_from_environment()

        if self._config_file.exists():
            logger.info(f"Loading database config from {self._config_file}")
            return self._load_from_file()

        logger.warning("Using default database configuration - not recommended for production")
        return self._load_default_config()

    def _has_env_config(self) -> bool:
        """Check if required environment variables are set"""
        return all(os.getenv(var) for var in self.REQUIRED_ENV_VARS)

    def _load_from_environment(self) -> DatabaseConfig:
        """Load configuration from environment variables"""
        return DatabaseConfig(
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '5433')),
            database=os.getenv('DB_NAME', 'puzzle_db'),
            user=os.getenv('DB_USER', 'puzzle_user'),
            password=os.getenv('DB_PASSWORD', ''),
            schema=os.getenv('DB_SCHEMA', 'public'),
            pool_size=int(os.getenv('DB_POOL_SIZE', '10')),
            timeout=int(os.getenv('DB_TIMEOUT', '30'))
        )

    def _load_from_file(self) -> DatabaseConfig:
        """Load configuration from JSON file, falling back to defaults when it is unusable"""
        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
            return DatabaseConfig(**config_data.get('database', {}))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Error loading config file: {e}")
            return self._load_default_config()

    def _load_default_config(self) -> DatabaseConfig:
        """Load default configuration (fallback)"""
        return DatabaseConfig(
            host='localhost',
            port=5433,
            database='puzzle_db',
            user='puzzle_user',
            password='puzzle_password',
            schema='public',
            pool_size=10,
            timeout=30
        )


def get_database_config(config_file: Optional[Path] = None) -> DatabaseConfig:
    """
    Get database configuration as structured object

    Returns:
        DatabaseConfig object with validation and methods
    """
    return SecureConfigManager(config_file).get_database_config()
