"""YAML configuration loading and validation.

The publish configuration anchors the page tree at a parent page ID and
names the local folder that is published below it.
"""

import logging
from typing import Any, Dict, List

import yaml

from .errors import ConfigError, FilesystemError
from .models import MermaidConfig, PublishConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".confluence-publish/config.yaml"


class ConfigLoader:
    """Handles configuration file loading and validation.

    Configuration file structure:
        confluence_base_url: "https://example.atlassian.net"
        parent_page_id: "123456"
        local_path: "./docs"
        exclude:
          - "drafts/**"
        max_workers: 10
        mermaid:
          command: "mmdc"
          timeout: 60
          scale: 2
          theme: "default"
          background: "white"
    """

    # Required top-level config fields
    REQUIRED_FIELDS = {'confluence_base_url', 'parent_page_id', 'local_path'}

    # Default values for optional fields
    DEFAULTS = {
        'max_workers': 10,
    }

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> PublishConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PublishConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        config = cls._parse_config(config_dict)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> PublishConfig:
        """Parse and validate configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        missing_fields = cls.REQUIRED_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        confluence_base_url = str(config_dict['confluence_base_url'] or '').strip().rstrip('/')
        parent_page_id = str(config_dict['parent_page_id'] or '').strip()
        local_path = str(config_dict['local_path'] or '').strip()

        if not confluence_base_url:
            raise ConfigError("Field cannot be empty", 'confluence_base_url')
        if not confluence_base_url.startswith(('http://', 'https://')):
            raise ConfigError(
                f"Must be an http(s) URL, got '{confluence_base_url}'",
                'confluence_base_url'
            )
        if not parent_page_id.isdigit():
            raise ConfigError(
                f"Must be a numeric page ID, got '{parent_page_id}'",
                'parent_page_id'
            )
        if not local_path:
            raise ConfigError("Field cannot be empty", 'local_path')

        exclude = cls._parse_exclude(config_dict.get('exclude'))

        try:
            max_workers = int(config_dict.get('max_workers', cls.DEFAULTS['max_workers']))
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid value: {str(e)}", 'max_workers')
        if max_workers < 1:
            raise ConfigError(
                f"Must be at least 1, got {max_workers}",
                'max_workers'
            )

        return PublishConfig(
            confluence_base_url=confluence_base_url,
            parent_page_id=parent_page_id,
            local_path=local_path,
            exclude=exclude,
            max_workers=max_workers,
            mermaid=cls._parse_mermaid(config_dict.get('mermaid')),
        )

    @classmethod
    def _parse_exclude(cls, exclude_raw: Any) -> List[str]:
        if exclude_raw is None:
            return []
        if not isinstance(exclude_raw, list):
            raise ConfigError("Field must be a list of glob patterns", 'exclude')
        return [str(pattern) for pattern in exclude_raw]

    @classmethod
    def _parse_mermaid(cls, mermaid_raw: Any) -> MermaidConfig:
        defaults = MermaidConfig()
        if mermaid_raw is None:
            return defaults
        if not isinstance(mermaid_raw, dict):
            raise ConfigError("Field must be a dictionary", 'mermaid')

        try:
            config = MermaidConfig(
                command=str(mermaid_raw.get('command', defaults.command)),
                timeout=int(mermaid_raw.get('timeout', defaults.timeout)),
                scale=int(mermaid_raw.get('scale', defaults.scale)),
                theme=str(mermaid_raw.get('theme', defaults.theme)),
                background=str(mermaid_raw.get('background', defaults.background)),
            )
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid field type: {str(e)}", 'mermaid')

        if config.timeout < 1:
            raise ConfigError(f"Must be at least 1, got {config.timeout}", 'mermaid.timeout')
        if config.scale < 1:
            raise ConfigError(f"Must be at least 1, got {config.scale}", 'mermaid.scale')
        return config
