from pathlib import Path
import json
import os
from typing import Dict, Any

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored). Only meaningful for a source
# checkout or editable install; set WALLET_LEDGER_CONFIG_DIR otherwise.
PROJECT_ROOT = Path(__file__).parents[3]
USER_CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_DIR_ENV_VAR = "WALLET_LEDGER_CONFIG_DIR"


def user_config_dir() -> Path:
    """Directory searched for user overrides"""
    override = os.getenv(CONFIG_DIR_ENV_VAR)
    return Path(override) if override else USER_CONFIG_DIR


class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        The user config directory is $WALLET_LEDGER_CONFIG_DIR when set,
        otherwise <project root>/config.

        Args:
            config_name: Name of the config file (e.g., 'importer.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = user_config_dir() / config_name
        if user_config_path.exists():
            with open(user_config_path, encoding="utf-8") as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path, encoding="utf-8") as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_importer_config() -> Dict[str, Any]:
        """Load CSV importer configuration"""
        return ConfigLoader.load_config('importer.json')
