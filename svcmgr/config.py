import os
import yaml
from dataclasses import dataclass, fields
from pathlib import Path

from svcmgr.constants import CONFIG_FILE, PROFILE_FILE
from svcmgr.errors import ConfigError


@dataclass
class Config:
    """Settings read from config.yaml."""

    switch: bool = True
    force: bool = False
    timeout: int = 90
    profile: Path = PROFILE_FILE


def config_path() -> Path:
    """Config file location, overridable with SVCMGR_CONFIG."""
    return Path(os.environ.get('SVCMGR_CONFIG', CONFIG_FILE))


def load_config(path: Path | None = None) -> Config:
    """Load config, falling back to defaults for anything not set."""
    path = path or config_path()
    if not path.exists():
        return Config()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f'Invalid YAML in {path}: {e}') from e

    if not isinstance(data, dict):
        raise ConfigError(f'Config must be a mapping: {path}')

    config = Config()
    known = {f.name for f in fields(Config)}
    for key, value in data.items():
        if key not in known:
            continue
        if key in ('switch', 'force') and not isinstance(value, bool):
            raise ConfigError(f'{key} must be true or false, got {value!r}')
        if key == 'timeout' and (isinstance(value, bool) or not isinstance(value, int) or value <= 0):
            raise ConfigError(f'timeout must be a positive number of seconds, got {value!r}')
        if key == 'profile':
            if not isinstance(value, str):
                raise ConfigError(f'profile must be a path, got {value!r}')
            value = Path(value).expanduser()
        setattr(config, key, value)

    return config
