"""YAML publish configuration loading and validation.

This module loads the settings of a publish run from a YAML file. Only the
space key is required; every other field has a default.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

import yaml

from .errors import FilesystemError, PublishConfigError
from .models import OrphanRemovalStrategy, PublishConfig, PublishingStrategy

E = TypeVar('E', bound=Enum)


class ConfigLoader:
    """Handles publish configuration file loading and validation.

    Configuration file structure:
        space_key: "DOCS"
        ancestor_id: "123456"
        parent_page_title: "Documentation"
        publishing_strategy: APPEND_TO_ANCESTOR
        orphan_removal_strategy: REMOVE_ORPHANS
        version_message: "Published by confluence-publish"
        notify_watchers: true
        sync_labels: true
        min_seconds_between_requests: 0.5
        request_timeout: 30
        skip_ssl_verification: false
    """

    DEFAULT_CONFIG_PATH = '.confluence-publish/config.yaml'

    # Required top-level config fields
    REQUIRED_FIELDS = {'space_key'}

    BOOLEAN_FIELDS = ('notify_watchers', 'sync_labels', 'skip_ssl_verification')

    @classmethod
    def load(cls, config_path: str) -> PublishConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PublishConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            PublishConfigError: If configuration is invalid or malformed
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
            raise PublishConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            raise PublishConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise PublishConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls.parse(config_dict)

    @classmethod
    def parse(cls, config_dict: Dict[str, Any]) -> PublishConfig:
        """Parse and validate a configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary

        Returns:
            Validated PublishConfig object

        Raises:
            PublishConfigError: If configuration is invalid
        """
        missing_fields = cls.REQUIRED_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise PublishConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        space_key = cls._optional_str(config_dict, 'space_key')
        if not space_key:
            raise PublishConfigError("Field cannot be empty", 'space_key')

        for name in cls.BOOLEAN_FIELDS:
            value = config_dict.get(name)
            if value is not None and not isinstance(value, bool):
                raise PublishConfigError(
                    f"Expected true or false, got {value!r}",
                    name
                )

        min_interval = cls._number(config_dict, 'min_seconds_between_requests', 0.0)
        if min_interval < 0:
            raise PublishConfigError(
                f"Must not be negative, got {min_interval}",
                'min_seconds_between_requests'
            )
        request_timeout = cls._number(config_dict, 'request_timeout', 30)
        if request_timeout <= 0:
            raise PublishConfigError(
                f"Must be positive, got {request_timeout}",
                'request_timeout'
            )

        return PublishConfig(
            space_key=space_key,
            ancestor_id=cls._optional_str(config_dict, 'ancestor_id'),
            parent_page_title=cls._optional_str(config_dict, 'parent_page_title'),
            publishing_strategy=cls._enum(
                config_dict, 'publishing_strategy',
                PublishingStrategy, PublishingStrategy.APPEND_TO_ANCESTOR
            ),
            orphan_removal_strategy=cls._enum(
                config_dict, 'orphan_removal_strategy',
                OrphanRemovalStrategy, OrphanRemovalStrategy.REMOVE_ORPHANS
            ),
            version_message=cls._optional_str(config_dict, 'version_message'),
            notify_watchers=config_dict.get('notify_watchers', True) is not False,
            sync_labels=config_dict.get('sync_labels', True) is not False,
            min_seconds_between_requests=min_interval,
            request_timeout=request_timeout,
            skip_ssl_verification=config_dict.get('skip_ssl_verification') is True,
        )

    @staticmethod
    def _optional_str(config_dict: Dict[str, Any], name: str) -> Optional[str]:
        value = config_dict.get(name)
        if value is None:
            return None
        if isinstance(value, (dict, list)):
            raise PublishConfigError(
                f"Expected a string, got {type(value).__name__}",
                name
            )
        value = str(value).strip()
        return value or None

    @staticmethod
    def _number(config_dict: Dict[str, Any], name: str, default: float) -> float:
        value = config_dict.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            raise PublishConfigError(f"Expected a number, got {value!r}", name)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise PublishConfigError(f"Expected a number, got {value!r}", name)

    @staticmethod
    def _enum(config_dict: Dict[str, Any], name: str, enum_type: Type[E], default: E) -> E:
        value = config_dict.get(name)
        if value is None:
            return default
        try:
            return enum_type(str(value).strip().upper())
        except ValueError:
            allowed = ', '.join(member.value for member in enum_type)
            raise PublishConfigError(
                f"Unknown value '{value}' (expected one of: {allowed})",
                name
            )
