"""
YAML configuration parser for the Sandbox Finder.

This module provides functionality to load, parse, and validate YAML configuration files
for the Sandbox Finder. It handles configuration file discovery, parsing, validation,
and provides helpful error messages for configuration issues.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
import logging
from dataclasses import dataclass

from platformdirs import user_config_dir
from pydantic import ValidationError

from ..models.config import FinderConfig
from ..tools.sandbox import SandboxPolicy, canonicalize, user_home_directory


logger = logging.getLogger(__name__)


APP_NAME = "sandbox-finder"


@dataclass
class ConfigParseResult:
    """
    Result of configuration parsing operation.

    Attributes:
        config: The parsed and validated configuration
        warnings: List of non-fatal warnings
        config_path: Path to the configuration file used
        is_default: Whether default configuration was used
    """
    config: FinderConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(Exception):
    """Raised when configuration parsing or validation fails."""
    pass


class ConfigParser:
    """
    YAML configuration parser with validation and error handling.

    This class handles loading YAML configuration files, validating their contents,
    and converting them to FinderConfig objects. It supports configuration file
    discovery, template generation, and comprehensive error reporting.
    """

    DEFAULT_CONFIG_NAMES = [
        '.sandboxfinder.yaml',
        '.sandboxfinder.yml',
        'sandboxfinder.yaml',
        'sandboxfinder.yml'
    ]

    def __init__(self, strict_mode: bool = False):
        """
        Initialize the configuration parser.

        Args:
            strict_mode: If True, treat warnings as errors
        """
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load and parse configuration from file or use defaults.

        Args:
            config_path: Path to configuration file. If None, searches for default files.

        Returns:
            ConfigParseResult containing parsed configuration and metadata

        Raises:
            ConfigurationError: If configuration is invalid or file cannot be read
        """
        if config_path:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}")

            config_data = self._load_yaml_file(config_path)
            is_default = False
        else:
            config_path, config_data = self._find_and_load_config()
            is_default = config_data is None
            if is_default:
                config_data = {}

        finder_config = self._build_config(config_data)

        warnings = finder_config.validate_configuration()
        warnings.extend(self._get_parser_warnings(finder_config, is_default))

        if self.strict_mode and warnings:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

        self.logger.info(f"Configuration loaded successfully from {config_path or 'defaults'}")

        return ConfigParseResult(
            config=finder_config,
            warnings=warnings,
            config_path=config_path,
            is_default=is_default
        )

    def get_search_paths(self) -> List[Path]:
        """Directories searched for a configuration file, in priority order."""
        paths = [Path.cwd()]

        home = user_home_directory()
        if home is not None:
            paths.append(home)

        paths.append(Path(user_config_dir(APP_NAME)))
        return paths

    def _find_and_load_config(self) -> tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load configuration file from default locations.

        Returns:
            Tuple of (config_path, config_data) or (None, None) if not found
        """
        for search_path in self.get_search_paths():
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.exists() and config_file.is_file():
                    try:
                        config_data = self._load_yaml_file(config_file)
                        self.logger.info(f"Found configuration file: {config_file}")
                        return config_file, config_data
                    except ConfigurationError as e:
                        self.logger.warning(f"Failed to load {config_file}: {e}")
                        continue

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse YAML file.

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed YAML data as dictionary

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()

            if not content.strip():
                self.logger.warning(f"Configuration file is empty: {file_path}")
                return {}

            data = yaml.safe_load(content)

            # Comment-only YAML
            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file must contain a YAML object, got {type(data).__name__}")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

    def _build_config(self, config_data: Dict[str, Any]) -> FinderConfig:
        """
        Validate configuration data and build a FinderConfig.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            return FinderConfig.from_dict(config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _get_parser_warnings(self, config: FinderConfig, is_default: bool) -> List[str]:
        """
        Get parser-specific warnings.

        Args:
            config: The parsed configuration
            is_default: Whether default configuration was used

        Returns:
            List of warning messages
        """
        warnings = []

        if is_default:
            warnings.append("No configuration file found, using default settings")

        if config.default_search_path:
            canonical = canonicalize(config.default_search_path)
            if canonical is not None and not SandboxPolicy(config.sandbox).is_allowed(canonical):
                warnings.append(
                    f"Default search path '{config.default_search_path}' is outside the allowed "
                    f"directories; searches without an explicit path will be rejected"
                )

        return warnings

    def save_config(self, config: FinderConfig, output_path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration to save
            output_path: Path where to save the configuration

        Raises:
            ConfigurationError: If file cannot be written
        """
        try:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            yaml_content = self._generate_yaml_with_comments(config.to_dict())

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(yaml_content)

            self.logger.info(f"Configuration saved to {output_path}")

        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file {output_path}: {e}") from e

    def _generate_yaml_with_comments(self, config_dict: Dict[str, Any]) -> str:
        """
        Generate YAML content with helpful comments.

        Args:
            config_dict: Configuration dictionary

        Returns:
            YAML content with comments
        """
        lines = [
            "# Sandbox Finder Configuration",
            "# Controls where searches start, how far they go and which directories they may touch",
            "",
        ]

        sections = [
            ("default_search_path", "Directory searched when none is given (empty means the home directory)"),
            ("limits", "Result and depth limits (max_depth may not exceed 3)"),
            ("sandbox", "Directories searches are allowed to touch")
        ]

        for section_name, comment in sections:
            if section_name in config_dict:
                lines.append(f"# {comment}")
                section_yaml = yaml.dump({section_name: config_dict[section_name]},
                                         default_flow_style=False,
                                         sort_keys=False)
                lines.append(section_yaml.rstrip())
                lines.append("")

        return "\n".join(lines)

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a configuration file without returning it.

        Args:
            config_path: Path to configuration file

        Returns:
            List of validation errors (empty if valid)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return [f"Configuration file not found: {config_path}"]

        try:
            self._build_config(self._load_yaml_file(config_path))
        except ConfigurationError as e:
            return [str(e)]

        return []

    def get_config_template(self) -> str:
        """
        Get a template configuration file with all options and comments.

        Returns:
            YAML template as string
        """
        return self._generate_yaml_with_comments(FinderConfig().to_dict())


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to configuration file (optional)
        strict_mode: Whether to treat warnings as errors

    Returns:
        ConfigParseResult containing parsed configuration

    Raises:
        ConfigurationError: If configuration is invalid
    """
    parser = ConfigParser(strict_mode=strict_mode)
    return parser.load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    """
    Convenience function to validate a configuration file.

    Args:
        config_path: Path to configuration file

    Returns:
        List of validation errors (empty if valid)
    """
    parser = ConfigParser()
    return parser.validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Create a template configuration file.

    Args:
        output_path: Where to save the template

    Raises:
        ConfigurationError: If template cannot be created
    """
    parser = ConfigParser()
    template_content = parser.get_config_template()

    try:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template_content)

    except OSError as e:
        raise ConfigurationError(f"Cannot create template file {output_path}: {e}") from e
