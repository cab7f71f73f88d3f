"""
Configuration loader for the linked-data authority service.
Handles environment files, authority YAML files and the process-wide
default language.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml
from dotenv import load_dotenv

from ld_authority import PROJECT_ROOT
from ld_authority.language import LanguageSpec, normalize_languages

logger = logging.getLogger(__name__)

CONFIG_DIR = PROJECT_ROOT / "config"
AUTHORITY_SUFFIXES = ('.yml', '.yaml')


class DefaultLanguage:
    """
    Process-wide default language(s), mutable at runtime.

    Readers take a snapshot once per request instead of reading the live
    value mid-pipeline.
    """

    def __init__(self, languages: LanguageSpec = ("en",)):
        self._lock = threading.Lock()
        self._languages = normalize_languages(languages)

    def set(self, languages: LanguageSpec) -> None:
        with self._lock:
            self._languages = normalize_languages(languages)
        logger.info(f"Default language set to {list(self._languages) or 'none'}")

    def snapshot(self) -> Tuple[str, ...]:
        with self._lock:
            return self._languages


default_language = DefaultLanguage()


class ConfigLoader:
    """Configuration loader for the linked-data authority service"""

    @staticmethod
    def load_config(env_file: str = None) -> Dict[str, Any]:
        """Load configuration from environment file"""
        if env_file:
            # If relative path provided, check both config/ and absolute path
            if not os.path.isabs(env_file):
                config_path = CONFIG_DIR / env_file
                if config_path.exists():
                    env_file = str(config_path)

            if os.path.exists(env_file):
                logger.info(f"Loading configuration from {env_file}")
                load_dotenv(env_file)
            else:
                logger.warning(f"Specified env file not found: {env_file}, loading default")
                default_env = CONFIG_DIR / ".env"
                if default_env.exists():
                    load_dotenv(default_env)
        else:
            default_env = CONFIG_DIR / ".env"
            if default_env.exists():
                logger.info(f"Loading configuration from {default_env}")
                load_dotenv(default_env)
            else:
                logger.warning("No .env file found in config/ directory, using environment only")

        config = {
            "default_language": normalize_languages(os.environ.get("DEFAULT_LANGUAGE", "en")),
            "authorities_dir": os.environ.get("AUTHORITIES_DIR", str(CONFIG_DIR / "authorities")),
            "request_timeout": float(os.environ.get("REQUEST_TIMEOUT", "30")),
            "port": int(os.environ.get("PORT", "5002")),
        }
        return config

    @staticmethod
    def load_authority_configs(authorities_dir: str = None) -> Dict[str, Dict[str, Any]]:
        """
        Load every authority YAML file in a directory.

        The authority name is the file name without suffix, upper-cased
        (``oclc_fast.yml`` -> ``OCLC_FAST``).

        Returns:
            Authority name -> raw configuration dict
        """
        directory = Path(authorities_dir) if authorities_dir else CONFIG_DIR / "authorities"
        if not directory.is_dir():
            logger.warning(f"Authorities directory not found: {directory}")
            return {}

        configs = {}
        for path in sorted(directory.iterdir()):
            if path.suffix.lower() not in AUTHORITY_SUFFIXES:
                continue
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
            if not loaded:
                logger.warning(f"Empty authority configuration: {path}")
                continue
            configs[path.stem.upper()] = loaded
            logger.info(f"Loaded authority configuration {path.stem.upper()} from {path}")
        return configs
