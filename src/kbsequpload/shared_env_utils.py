"""Shared environment management for configuration and authentication tokens."""

import os
from configparser import ConfigParser
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .base_utils import BaseUtils

# Standard kbsequpload directory
KBSEQUPLOAD_DIR = Path.home() / ".kbsequpload"
DEFAULT_CONFIG_FILE = KBSEQUPLOAD_DIR / "config.yaml"

TOKEN_ENV_VAR = "KB_AUTH_TOKEN"


class SharedEnvUtils(BaseUtils):
    """Manages configuration files, environment variables and the KBase token.

    Configuration priority order:
    1. Explicitly provided config_file parameter
    2. ~/.kbsequpload/config.yaml (user config)

    Token priority order:
    1. Explicitly provided token parameter
    2. The KB_AUTH_TOKEN environment variable
    3. The "kbase" entry of token_file, or the contents of kbase_token_file
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        token_file: Optional[Union[str, Path]] = Path.home() / ".tokens",
        kbase_token_file: Optional[Union[str, Path]] = Path.home() / ".kbase" / "token",
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the shared environment which manages configurations and authentication tokens.

        Args:
            config_file: Optional explicit config file path. If None, uses priority order.
            token_file: Path to token file (default: ~/.tokens)
            kbase_token_file: Path to KBase token file (default: ~/.kbase/token)
            token: Optional KBase token, overrides environment and token files
            **kwargs: Additional arguments passed to BaseUtils
        """
        super().__init__(**kwargs)

        self._config_hash = {}
        self._config_file = self._find_config_file(config_file)

        if self._config_file:
            self._config_hash = self.read_config()
            self.log_info(f"Loaded configuration from: {self._config_file}")

        self._token_hash = {}
        self._env_vars = {}
        self._token_file = Path(token_file) if token_file else None
        self._kbase_token_file = Path(kbase_token_file) if kbase_token_file else None
        if (self._token_file and self._token_file.exists()) or (
            self._kbase_token_file and self._kbase_token_file.exists()
        ):
            self._token_hash = self.read_token_file()
        self.load_environment_variables()

        if TOKEN_ENV_VAR in self._env_vars:
            self.set_token(self._env_vars[TOKEN_ENV_VAR])
        if token:
            self.set_token(token)

    def _find_config_file(self, explicit_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Find the configuration file using priority order.

        Args:
            explicit_path: Optional explicit config file path

        Returns:
            Path to config file, or None if not found
        """
        if explicit_path:
            explicit = Path(explicit_path)
            if explicit.exists():
                return explicit
            self.log_warning(f"Explicit config file not found: {explicit_path}")
            return None

        if DEFAULT_CONFIG_FILE.exists():
            return DEFAULT_CONFIG_FILE

        self.log_debug("No configuration file found")
        return None

    def read_config(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Dict[str, Any]:
        """Read configuration from a file.

        Supports both YAML (.yaml, .yml) and INI formats.

        Args:
            config_file: Optional path to config file. Uses self._config_file if None.

        Returns:
            Configuration dictionary
        """
        if config_file is None:
            config_file = self._config_file

        if config_file is None:
            return {}

        config_path = Path(config_file)
        confighash = {}

        try:
            if not config_path.exists():
                self.log_warning(f"Config file not found: {config_path}")
                return confighash

            if config_path.suffix in [".yaml", ".yml"]:
                with open(config_path, "r") as f:
                    confighash = yaml.safe_load(f) or {}
                self.log_debug(f"Loaded YAML config from {config_path}")
            else:
                config = ConfigParser()
                config.read(config_path)
                for section in config.sections():
                    confighash[section] = {}
                    for nameval in config.items(section):
                        confighash[section][nameval[0]] = nameval[1]
                self.log_debug(f"Loaded INI config from {config_path}")

            return confighash

        except Exception as e:
            self.log_error(f"Error parsing config file {config_path}: {e}")
            raise

    def get_config_value(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., "shock.url")
            default: Default value if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> util.get_config_value("sra.converter")
            'fastq-dump'
            >>> util.get_config_value("upload.connect_timeout", default=10)
            10
        """
        keys = key_path.split(".")
        value = self._config_hash

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                self.log_debug(f"Config key '{key_path}' not found, using default: {default}")
                return default

        return value

    def read_token_file(
        self, token_file: Optional[Union[str, Path]] = None
    ) -> Dict[str, Any]:
        """Load authentication tokens from a file."""
        # One "name=value" pair per line
        token_hash = {}
        if token_file is None:
            token_file = self._token_file

        try:
            if token_file is not None and Path(token_file).exists():
                with open(token_file) as fh:
                    for line in fh:
                        line = line.strip()
                        if not line or line.startswith("#"):
                            continue
                        if "=" not in line:
                            self.log_warning(f"Skipping malformed line in {token_file}")
                            continue
                        key, value = line.split("=", 1)
                        token_hash[key] = value
                self.log_info(f"Loaded {len(token_hash)} tokens from {token_file}")
            if self._kbase_token_file is not None and self._kbase_token_file.exists():
                with open(self._kbase_token_file) as fh:
                    token_hash["kbase"] = fh.read().strip()
                self.log_info(f"Loaded kbase token from {self._kbase_token_file}")
            return token_hash
        except Exception as e:
            self.log_error(f"Error loading tokens from {token_file}: {e}")
            raise

    def set_token(self, token, namespace="kbase"):
        """Set a token for the current run without writing it to disk."""
        self._token_hash[namespace] = token

    def get_token(self, namespace="kbase") -> Any:
        """Retrieve a stored token."""
        return self._token_hash.get(namespace, None)

    def load_environment_variables(self) -> None:
        """Load KBase related environment variables."""
        env_prefixes = ["KB_", "KBASE_"]

        for key, value in os.environ.items():
            if any(key.startswith(prefix) for prefix in env_prefixes):
                self._env_vars[key] = value

        self.log_debug(f"Loaded {len(self._env_vars)} environment variables")
