"""Default boot target selection."""

import logging
from dataclasses import dataclass

from svcmgr.constants import HIDDEN_TARGETS, TARGET_SUFFIX
from svcmgr.errors import TargetError
from svcmgr.gateway import Gateway, strip_suffix

logger = logging.getLogger(__name__)


@dataclass
class Target:
    name: str
    label: str
    is_default: bool = False


def parse_targets(stdout: str) -> dict[str, str]:
    """Parse target listing into {name: description}."""
    targets = {}
    for line in stdout.splitlines():
        parts = line.split()
        if parts and not parts[0].endswith(TARGET_SUFFIX):
            parts = parts[1:]
        if len(parts) < 4 or not parts[0].endswith(TARGET_SUFFIX):
            continue
        unit, _loaded, _active, _sub, *description = parts
        targets[strip_suffix(unit, TARGET_SUFFIX)] = ' '.join(description)
    return targets


def parse_isolatable(stdout: str) -> set[str]:
    """Parse 'systemctl show --property=Id,AllowIsolate' blocks into names that allow isolation."""
    allowed = set()
    unit = None
    for line in stdout.splitlines():
        key, _, value = line.strip().partition('=')
        if key == 'Id':
            unit = value
        elif key == 'AllowIsolate' and value == 'yes' and unit:
            allowed.add(strip_suffix(unit, TARGET_SUFFIX))
    return allowed


class TargetSelector:
    """Reads the targets a host can boot into and stages a new default."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self.targets: dict[str, str] = {}
        self.default_target = ''
        self._saved_default = ''
        self.read()

    def read(self):
        result = self.gateway.list_targets()
        if not result.ok:
            raise TargetError(f'Could not list targets: {result.stderr.strip()}')
        described = parse_targets(result.stdout)
        candidates = [name for name in sorted(described) if name not in HIDDEN_TARGETS]

        allowed = set()
        if candidates:
            result = self.gateway.show_targets(candidates)
            if not result.ok:
                raise TargetError(f'Could not read target properties: {result.stderr.strip()}')
            allowed = parse_isolatable(result.stdout)

        self.targets = {name: described[name] for name in candidates if name in allowed}

        result = self.gateway.get_default()
        if not result.ok:
            raise TargetError(f'Could not read default target: {result.stderr.strip()}')
        self.default_target = strip_suffix(result.stdout.strip(), TARGET_SUFFIX)
        self._saved_default = self.default_target
        logger.info('Default target: %s, available: %s', self.default_target, ', '.join(self.targets))

    def list(self) -> list[Target]:
        return [
            Target(name=name, label=description or name, is_default=name == self.default_target)
            for name, description in self.targets.items()
        ]

    def get_default(self) -> str:
        return self.default_target

    def set_default(self, name: str):
        name = strip_suffix(name, TARGET_SUFFIX)
        if name not in self.targets:
            raise TargetError(f'Unknown target: {name}')
        self.default_target = name

    @property
    def modified(self) -> bool:
        return self.default_target != self._saved_default

    def save(self) -> bool:
        if not self.modified:
            return True
        result = self.gateway.set_default(self.default_target)
        if not result.ok:
            logger.error('Could not set default target %s: %s', self.default_target, result.stderr.strip())
            return False
        self._saved_default = self.default_target
        return True

    def reset(self):
        self.read()
