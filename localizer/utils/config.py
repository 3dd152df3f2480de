"""Configuration management for the localizer."""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field

from ..core.localizer import LocalizerOptions
from ..formats import FORMATS
from .validators import is_valid_locale_code, is_valid_namespace

CONFIG_FILE_NAME = '.localizer.yml'


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class ProjectConfig:
    """Project configuration."""
    name: str = "Unnamed Project"


@dataclass
class PathsConfig:
    """Paths configuration."""
    root: str = "."
    locale_dir: str = "lang"
    files: List[str] = field(default_factory=lambda: ['**/*.php', '**/*.htm'])


@dataclass
class LocalesConfig:
    """Locales configuration."""
    default: str = "en"
    namespace: str = ""  # e.g. acme.blog


@dataclass
class FormatConfig:
    """Locale file format configuration."""
    name: str = "php"  # php | php-cli | yaml | json
    parse_timeout: float = 10.0


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "localhost"
    port: int = 3005


@dataclass
class Config:
    """Main configuration class."""
    project: ProjectConfig = field(default_factory=ProjectConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    locales: LocalesConfig = field(default_factory=LocalesConfig)
    format: FormatConfig = field(default_factory=FormatConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Directory of the loaded file; relative paths resolve against it
    base_dir: Optional[Path] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from YAML file."""
        if config_path is None:
            # Look for .localizer.yml in current directory
            config_path = Path.cwd() / CONFIG_FILE_NAME

            if not config_path.exists():
                # Return default config
                return cls()

        config_path = Path(config_path)
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigValidationError([f"{config_path} must contain a mapping"])

        try:
            return cls(
                project=ProjectConfig(**(data.get('project') or {})),
                paths=PathsConfig(**(data.get('paths') or {})),
                locales=LocalesConfig(**(data.get('locales') or {})),
                format=FormatConfig(**(data.get('format') or {})),
                server=ServerConfig(**(data.get('server') or {})),
                base_dir=config_path.parent,
            )
        except TypeError as e:
            raise ConfigValidationError([f"Unknown option in {config_path}: {e}"]) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'project': {
                'name': self.project.name,
            },
            'paths': {
                'root': self.paths.root,
                'locale_dir': self.paths.locale_dir,
                'files': self.paths.files,
            },
            'locales': {
                'default': self.locales.default,
                'namespace': self.locales.namespace,
            },
            'format': {
                'name': self.format.name,
                'parse_timeout': self.format.parse_timeout,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
            },
        }

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @property
    def root_path(self) -> Path:
        """Project root, resolved against the directory of the config file."""
        root = Path(self.paths.root)
        if not root.is_absolute() and self.base_dir is not None:
            root = self.base_dir / root
        return root

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors = []
        warnings = []

        # Validate format
        if self.format.name not in FORMATS:
            errors.append(
                f"Invalid format '{self.format.name}'. "
                f"Valid options: {', '.join(FORMATS)}"
            )

        if self.format.parse_timeout <= 0:
            errors.append(f"format.parse_timeout must be positive, got {self.format.parse_timeout}")

        # Validate default locale
        if not is_valid_locale_code(self.locales.default):
            errors.append(
                f"Invalid default locale: '{self.locales.default}'. "
                f"Use a locale code (e.g., 'en', 'de', 'pt-br')"
            )

        # Validate namespace
        if not self.locales.namespace:
            errors.append("locales.namespace cannot be empty (e.g., 'acme.blog')")
        elif not is_valid_namespace(self.locales.namespace):
            errors.append(f"Invalid namespace: '{self.locales.namespace}'")

        # Validate paths
        if not self.paths.files:
            warnings.append(ConfigValidationWarning(
                "paths.files is empty, no source references will be found"
            ))

        root = self.root_path
        if not root.exists():
            warnings.append(ConfigValidationWarning(
                f"Root path does not exist: {self.paths.root}"
            ))
        elif not (root / self.paths.locale_dir / self.locales.default).is_dir():
            warnings.append(ConfigValidationWarning(
                f"Default locale directory does not exist: "
                f"{Path(self.paths.locale_dir) / self.locales.default}"
            ))

        # Validate server port
        if not 0 <= self.server.port <= 65535:
            errors.append(f"server.port must be between 0 and 65535, got {self.server.port}")

        # Raise error if requested
        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings

    def to_options(self) -> LocalizerOptions:
        """Build the localizer options described by this configuration."""
        return LocalizerOptions(
            root=self.root_path,
            default_locale=self.locales.default,
            namespace=self.locales.namespace,
            locale_dir=self.paths.locale_dir,
            files=list(self.paths.files),
            file_format=self.format.name,
            parse_timeout=self.format.parse_timeout,
        )


def create_default_config(file_format: str = 'php') -> Config:
    """Create default configuration for a locale file format."""
    config = Config()
    config.format.name = file_format

    # Format-specific defaults
    if file_format in ('php', 'php-cli'):
        config.paths.locale_dir = 'lang'
        config.paths.files = ['**/*.php', '**/*.htm']
    elif file_format == 'yaml':
        config.paths.locale_dir = 'locales'
        config.paths.files = ['**/*.php', '**/*.htm', '**/*.twig']
    elif file_format == 'json':
        config.paths.locale_dir = 'locales'
        config.paths.files = ['src/**/*.js', 'src/**/*.ts', 'src/**/*.vue']

    return config
