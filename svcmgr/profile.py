import yaml
from pathlib import Path

from svcmgr.errors import ProfileError
from svcmgr.gateway import strip_suffix


def load_profile(path: Path) -> list[str]:
    """Load service names to enable from a profile file."""
    if not path.exists():
        raise ProfileError(f'Profile not found: {path}')

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProfileError(f'Invalid YAML in {path}: {e}') from e

    if isinstance(data, dict):
        data = data.get('services')
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
        raise ProfileError(f'Profile must list service names: {path}')

    # Stable de-dupe preserving first-seen order
    seen = set()
    names = []
    for name in map(strip_suffix, data):
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def save_profile(path: Path, names: set[str]):
    """Write enabled service names to a profile file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump({'services': sorted(names)}, f, sort_keys=False, default_flow_style=False)
