"""
Configuration management for the weather dashboard.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils
from lib.openweathermap import MissingCredentialError

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute environment variable placeholders in configuration values.

    This function processes strings, dictionaries, and lists to replace placeholders
    in the format ${VAR_NAME} with their corresponding environment variable values.

    Args:
        value: The configuration value to process. Can be a string, dict, list, or other type.

    Returns:
        The processed value with environment variables substituted:
        - For strings: returns the string with placeholders replaced
        - For dictionaries: returns a new dict with substituted values
        - For lists: returns a new list with substituted items
        - For other types: returns the original value unchanged
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_RE.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading and validation for the weather dashboard."""

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.config_path = configPath
        self.config_dirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

        rootDir = self.config.get("application", {}).get("root-dir", None)
        if rootDir is not None:
            os.chdir(rootDir)
            logger.info(f"Changed root directory to {rootDir}")

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory."""
        toml_files = []
        dir_path = Path(directory)

        if not dir_path.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping")
            return toml_files

        if not dir_path.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping")
            return toml_files

        try:
            for toml_file in dir_path.rglob("*.toml"):
                if toml_file.is_file():
                    toml_files.append(toml_file)
                    logger.debug(f"Found config file: {toml_file}")
        except OSError as e:
            logger.error(f"Error scanning directory {directory}: {e}")

        return sorted(toml_files)  # Sort for consistent ordering

    def _mergeConfigs(self, base_config: Dict[str, Any], new_config: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries."""
        merged = base_config.copy()

        for key, value in new_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories.

        Files from config directories are merged on top of the main file in sorted
        path order; arrays are replaced, tables are merged.

        Raises:
            SystemExit: If the main configuration file is not found and no config
                        directories are provided, or if the main file can not be parsed.
        """
        config_file = Path(self.config_path)
        hasConfigFile = config_file.exists()
        if not hasConfigFile and not self.config_dirs:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(config_file, "rb") as f:
                    config = tomli.load(f)
                logger.info(f"Loaded main config from {self.config_path}")
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration: {e}")
                sys.exit(1)

        if self.config_dirs:
            logger.info(f"Scanning {len(self.config_dirs)} config directories for .toml files")

            for config_dir in self.config_dirs:
                toml_files = self._findTomlFilesRecursive(config_dir)
                logger.info(f"Found {len(toml_files)} .toml files in {config_dir}")

                for toml_file in toml_files:
                    try:
                        with open(toml_file, "rb") as f:
                            dir_config = tomli.load(f)
                    except (OSError, tomli.TOMLDecodeError) as e:
                        # Continue with other files instead of exiting
                        logger.error(f"Failed to load config file {toml_file}: {e}")
                        continue

                    config = self._mergeConfigs(config, dir_config)
                    logger.info(f"Merged config from {toml_file}")

        logger.info("Configuration loaded and merged successfully")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getOpenWeatherMapConfig(self) -> Dict[str, Any]:
        """
        Get OpenWeatherMap configuration

        Returns:
            Dict with OpenWeatherMap settings (api-key, request-timeout, default-language)
        """
        return self.get("openweathermap", {})

    def getOpenWeatherMapApiKey(self) -> str:
        """
        Get OpenWeatherMap API key

        Raises:
            MissingCredentialError: If the key is absent, empty or an unresolved ${VAR} placeholder
        """
        apiKey = str(self.getOpenWeatherMapConfig().get("api-key", "") or "").strip()
        if not apiKey or ENV_PLACEHOLDER_RE.fullmatch(apiKey):
            logger.error("OpenWeatherMap API key is not configured")
            raise MissingCredentialError()
        return apiKey

    def getDashboardConfig(self) -> Dict[str, Any]:
        """
        Get dashboard configuration

        Returns:
            Dict with dashboard settings (aqi-refresh-interval)
        """
        return self.get("dashboard", {})
