"""Configuration service - YAML-backed metasearch settings.

Loads and saves ``MetasearchConfig`` at a configurable path.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from metasearch.config_schema import MetasearchConfig
from metasearch.paths import get_user_data_dir

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing metasearch configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize config service.

        Args:
            config_file: Path to config file. Defaults to
                $METASEARCH_HOME/config.yaml (~/.metasearch/config.yaml)
        """
        if config_file is None:
            self.config_dir = get_user_data_dir()
            self.config_file = self.config_dir / "config.yaml"
        else:
            self.config_file = Path(config_file)
            self.config_dir = self.config_file.parent

    def load(self) -> MetasearchConfig:
        """Load configuration from YAML file.

        Creates default config if file doesn't exist. A file that cannot be
        parsed, or holds invalid values, yields the defaults.

        Returns:
            MetasearchConfig instance.
        """
        if not self.config_file.exists():
            config = MetasearchConfig.create_default()
            self.save(config)
            return config

        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
            return MetasearchConfig.from_dict(data)
        except (yaml.YAMLError, IOError, TypeError, ValueError) as e:
            logger.warning(f"Invalid config at {self.config_file}, using defaults: {e}")
            return MetasearchConfig.create_default()

    def save(self, config: MetasearchConfig) -> None:
        """Save configuration to YAML file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(
                config.to_dict(), f, default_flow_style=False, sort_keys=False
            )

    def update(self, **kwargs: Any) -> MetasearchConfig:
        """Update specific config values.

        Keys are prefixed with their section:
        - search_*: search settings
        - cache_*: cache settings
        - scoring_*: scoring weights
        - enrichment_*: enrichment settings
        - server_*: REST server settings

        Returns:
            Updated MetasearchConfig.

        Examples:
            service.update(search_max_results=10)
            service.update(cache_ttl_seconds=600)
        """
        config = self.load()

        sections = {
            "search_": config.search,
            "cache_": config.cache,
            "scoring_": config.scoring,
            "enrichment_": config.enrichment,
            "server_": config.server,
        }

        for key, value in kwargs.items():
            updated = False
            for prefix, section in sections.items():
                if key.startswith(prefix):
                    attr_name = key.replace(prefix, "", 1)
                    if hasattr(section, attr_name):
                        setattr(section, attr_name, value)
                        updated = True
                    else:
                        logger.warning(
                            "Config key '%s' has no attribute '%s' on %s",
                            key,
                            attr_name,
                            type(section).__name__,
                        )
                    break
            if not updated:
                logger.warning("Unknown config key ignored: '%s'", key)

        # Re-run dataclass validation on the updated values
        config = MetasearchConfig.from_dict(config.to_dict())
        self.save(config)
        return config
