"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import os
from pathlib import Path, PurePosixPath

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigurationError

DEFAULT_CONFIG_FILES = [
    'config.json',
    'change_monitor.yaml',
    'change_monitor.yml',
    '.change_monitor.yaml',
]


class MonitorConfig(BaseModel):
    """Change monitor configuration.

    Both the snake_case keys and the capitalized ``Path``/``Files`` keys of
    older JSON configuration files are accepted.

    Examples:
        >>> # Programmatic configuration
        >>> config = MonitorConfig(path='/data/watched', files=['file1.txt', 'file2.txt'])

        >>> # Load from a YAML or JSON file
        >>> config = MonitorConfig.from_yaml('config.json')

        >>> # Load from environment (looks for CHANGE_MONITOR_CONFIG)
        >>> config = MonitorConfig.from_env()
    """

    model_config = ConfigDict(populate_by_name=True)

    path: Path = Field(
        validation_alias=AliasChoices('path', 'Path'),
        description='Directory containing the watched files',
    )
    files: list[str] = Field(
        validation_alias=AliasChoices('files', 'Files'),
        description='File names, relative to path, to watch',
    )
    flush_interval: float = Field(
        default=5.0,
        gt=0.0,
        description='Seconds between change reports',
    )
    create_missing: bool = Field(
        default=True,
        description='Create the watch folder and missing watched files at startup',
    )
    log_level: str = Field(
        default='INFO',
        description='Logging level name',
    )

    @field_validator('files')
    @classmethod
    def validate_files(cls, files: list[str]) -> list[str]:
        if not files:
            raise ValueError('at least one file must be watched')

        names: list[str] = []
        for name in files:
            pure = PurePosixPath(name.replace('\\', '/'))
            if not pure.parts or pure.is_absolute() or '..' in pure.parts or Path(name).is_absolute():
                raise ValueError(f'watched file {name!r} must be a path inside the watch folder')
            # Watcher events are matched against POSIX-style relative names
            names.append(pure.as_posix())

        # Drop duplicates, keep configured order
        return list(dict.fromkeys(names))

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, level: str) -> str:
        return level.upper()

    @classmethod
    def from_yaml(cls, path: str | Path) -> 'MonitorConfig':
        """Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file

        Returns:
            MonitorConfig instance loaded from the file

        Raises:
            ConfigurationError: If the file is missing, unparseable or invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f'Configuration file not found: {path}')

        try:
            with open(path, encoding='utf-8') as f:
                config_dict = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f'Could not read configuration file {path}: {e}') from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f'Configuration file {path} must contain a mapping')

        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f'Invalid configuration in {path}: {e}') from e

    @classmethod
    def from_env(cls, env_var: str = 'CHANGE_MONITOR_CONFIG') -> 'MonitorConfig':
        """Load configuration from a file named in an environment variable.

        Args:
            env_var: Name of the environment variable containing the config file path

        Returns:
            MonitorConfig instance loaded from the file

        Raises:
            ConfigurationError: If no configuration file can be found or loaded
        """
        config_path = os.getenv(env_var)
        if config_path:
            return cls.from_yaml(config_path)

        for default_file in DEFAULT_CONFIG_FILES:
            if Path(default_file).exists():
                return cls.from_yaml(default_file)

        raise ConfigurationError(
            f'No configuration found: set {env_var} or create one of {", ".join(DEFAULT_CONFIG_FILES)}'
        )
