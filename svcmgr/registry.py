"""In-memory service state, staged until the reconciler commits it."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from svcmgr.gateway import Gateway

logger = logging.getLogger(__name__)


class StartMode(str, Enum):
    ON_BOOT = 'on_boot'
    MANUALLY = 'manually'

    @property
    def label(self) -> str:
        return 'On Boot' if self is StartMode.ON_BOOT else 'Manually'


@dataclass
class ServiceRecord:
    """Staged state of one service unit."""

    name: str
    enabled: bool = False
    active: bool = False
    loaded: bool = False
    description: str = ''
    modified: bool = False

    @property
    def start_mode(self) -> StartMode:
        return StartMode.ON_BOOT if self.enabled else StartMode.MANUALLY


class Registry:
    """Service records keyed by name, plus pending errors."""

    def __init__(self, gateway: Gateway, records: Iterable[ServiceRecord] = ()):
        self.gateway = gateway
        self._services: dict[str, ServiceRecord] = {}
        self._errors: list[str] = []
        self.replace(records)

    def replace(self, records: Iterable[ServiceRecord]):
        """Swap in a freshly loaded set of records, dropping staged state."""
        self._services = {record.name: record for record in records}
        self._errors = []

    @property
    def modified(self) -> bool:
        """True while any record has changes that were not committed."""
        return any(record.modified for record in self._services.values())

    # Lookup

    def get(self, name: str) -> ServiceRecord | None:
        return self._services.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._services

    def names(self) -> list[str]:
        return sorted(self._services)

    def records(self) -> list[ServiceRecord]:
        """All records, sorted by name."""
        return [self._services[name] for name in self.names()]

    def modified_records(self) -> list[ServiceRecord]:
        return [record for record in self.records() if record.modified]

    def is_enabled(self, name: str) -> bool | None:
        record = self.get(name)
        return record.enabled if record else None

    def is_active(self, name: str) -> bool | None:
        record = self.get(name)
        return record.active if record else None

    def can_be_toggled(self, name: str) -> bool:
        record = self.get(name)
        return record is not None and record.loaded

    # Staging

    def _stage(self, name: str, field: str, value: bool):
        record = self.get(name)
        if record is None:
            logger.debug('Ignoring %s=%s for unknown service %s', field, value, name)
            return
        setattr(record, field, value)
        record.modified = True
        logger.debug('Staged %s=%s for %s', field, value, name)

    def enable(self, name: str):
        self._stage(name, 'enabled', True)

    def disable(self, name: str):
        self._stage(name, 'enabled', False)

    def activate(self, name: str):
        self._stage(name, 'active', True)

    def deactivate(self, name: str):
        self._stage(name, 'active', False)

    def toggle_enablement(self, name: str):
        record = self.get(name)
        if record is not None:
            self._stage(name, 'enabled', not record.enabled)

    def toggle_activity(self, name: str):
        record = self.get(name)
        if record is not None:
            self._stage(name, 'active', not record.active)

    def set_start_mode(self, name: str, mode: StartMode):
        if mode is StartMode.ON_BOOT:
            self.enable(name)
        else:
            self.disable(name)

    # Profiles

    def export(self) -> set[str]:
        """Names of services staged as enabled."""
        return {record.name for record in self._services.values() if record.enabled}

    def import_profile(self, names: Iterable[str]) -> list[str]:
        """Enable exactly the given services, disable every other one.

        Returns requested names that are not known on this system.
        """
        wanted = set(names)
        for name in self.names():
            if name in wanted:
                self.enable(name)
            else:
                self.disable(name)

        unknown = sorted(wanted - set(self._services))
        for name in unknown:
            logger.warning("Service %s doesn't exist on this system", name)
        return unknown

    # Errors and status

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(self._errors)

    def add_error(self, message: str):
        self._errors.append(message)
        logger.error(message)

    def reset(self):
        """Forget errors and every modified flag. Staged values stay until the next load."""
        self._errors = []
        for record in self._services.values():
            record.modified = False

    def status(self, name: str) -> str:
        return self.gateway.status(name)
