"""Database configuration loader for the warehouse connection string."""

import os
import yaml
from urllib.parse import parse_qs, unquote, urlsplit
from typing import Dict, Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from redshift_mcp.models.error_types import ConfigError

DEFAULT_PORT = 5439
DEFAULT_DATABASE = 'dev'

# Option name -> (environment variable, default)
OPTION_DEFAULTS = {
    'pool_size': ('DB_POOL_SIZE', 5),
    'connect_timeout': ('DB_CONNECT_TIMEOUT', 10),
    'query_timeout': ('DB_QUERY_TIMEOUT', 0),
}


class DatabaseConfig:
    """Connection configuration built from ``DATABASE_URL``.

    Connection options (pool size and timeouts) may come from a YAML file
    named by ``REDSHIFT_MCP_CONFIG``; anything the file leaves out falls
    back to the ``DB_*`` environment variables and then to defaults.
    """

    def __init__(self, database_url: Optional[str] = None, config_path: Optional[str] = None):
        load_dotenv()

        self.database_url = database_url or os.getenv('DATABASE_URL')
        if not self.database_url:
            raise ConfigError("DATABASE_URL environment variable is not set")

        self._parse_url(self.database_url)
        self.connection_options = self._load_options(config_path)

    def _parse_url(self, url: str):
        """Parse the connection string into its components."""
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.hostname:
            raise ConfigError("DATABASE_URL must include a scheme and a host")

        try:
            port = parsed.port
        except ValueError:
            raise ConfigError("DATABASE_URL has an invalid port")

        self.scheme = parsed.scheme
        self.host = parsed.hostname
        self._explicit_port = port
        self.port = port or DEFAULT_PORT
        # Credentials and database name arrive percent-encoded
        self.database = unquote(parsed.path.lstrip('/')) or DEFAULT_DATABASE
        self.user = unquote(parsed.username or '')
        self.password = unquote(parsed.password or '')

        query = parse_qs(parsed.query)
        self.ssl = query.get('ssl', ['false'])[0].lower() == 'true'
        explicit_mode = query.get('sslmode', [None])[0]
        if explicit_mode:
            self.sslmode = explicit_mode
        else:
            self.sslmode = 'require' if self.ssl else 'disable'

    def _load_options(self, config_path: Optional[str]) -> Dict[str, int]:
        """Resolve connection options from YAML, environment and defaults."""
        file_options = self._load_yaml_options(config_path)

        options = {}
        for name, (env_var, default) in OPTION_DEFAULTS.items():
            raw = file_options.get(name, os.getenv(env_var, default))
            try:
                value = int(raw)
            except (TypeError, ValueError):
                raise ConfigError(f"Invalid {name} value: {raw}")
            if value < 0 or (name == 'pool_size' and value < 1):
                raise ConfigError(f"Invalid {name} value: {raw}")
            options[name] = value
        return options

    def _load_yaml_options(self, config_path: Optional[str]) -> Dict[str, Any]:
        """Read ``connection_options`` from the YAML server config, if any."""
        path = config_path or os.getenv('REDSHIFT_MCP_CONFIG')
        if path is None:
            default_path = Path('config') / 'server.yaml'
            if not default_path.exists():
                return {}
            path = default_path

        try:
            with open(path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}")

        options = config_data.get('connection_options', {}) if isinstance(config_data, dict) else {}
        if not isinstance(options, dict):
            raise ConfigError(f"connection_options in {path} must be a mapping")
        return options

    @property
    def pool_size(self) -> int:
        return self.connection_options['pool_size']

    @property
    def connect_timeout(self) -> int:
        return self.connection_options['connect_timeout']

    @property
    def query_timeout(self) -> int:
        return self.connection_options['query_timeout']

    @property
    def resource_base_url(self) -> str:
        """Base for resource URIs: scheme, host and port, never credentials."""
        host = f"[{self.host}]" if ':' in self.host else self.host
        if self._explicit_port:
            host = f"{host}:{self._explicit_port}"
        return f"{self.scheme}://{host}/"

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to keyword arguments for psycopg2."""
        return {
            'host': self.host,
            'port': self.port,
            'database': self.database,
            'user': self.user,
            'password': self.password,
            'sslmode': self.sslmode,
            'connect_timeout': self.connect_timeout,
            'query_timeout': self.query_timeout,
        }
