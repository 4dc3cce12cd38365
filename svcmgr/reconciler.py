"""Commit staged service changes in two phases: enablement, then start/stop."""

import logging
from dataclasses import dataclass, field

from svcmgr.errors import SaveOutcome
from svcmgr.gateway import Gateway
from svcmgr.registry import Registry, ServiceRecord

logger = logging.getLogger(__name__)


@dataclass
class SaveReport:
    """What a save attempt did."""

    outcome: SaveOutcome
    toggled: list[str] = field(default_factory=list)
    switched: list[str] = field(default_factory=list)
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.outcome is SaveOutcome.SUCCESS


class Reconciler:
    def __init__(self, registry: Registry, gateway: Gateway | None = None):
        self.registry = registry
        self.gateway = gateway or registry.gateway
        self.outcome: SaveOutcome | None = None

    def save(self, force: bool = False, switch: bool = True) -> bool:
        """Write staged changes. Returns True if everything was committed."""
        return self.commit(force=force, switch=switch).ok

    def commit(self, force: bool = False, switch: bool = True) -> SaveReport:
        if self.registry.errors:
            logger.warning('Refusing to save while previous errors are pending')
            return self._finish(SaveReport(SaveOutcome.REJECTED))

        # Both phases work on the services that were pending when the save began
        selected = self._selected(force)
        report = SaveReport(SaveOutcome.SUCCESS)
        report.toggled = self.toggle_services(selected)
        if self.registry.errors:
            return self._finish(report, SaveOutcome.PARTIAL_FAILURE)

        if switch:
            report.switched = self.switch_services(selected)
            if self.registry.errors:
                return self._finish(report, SaveOutcome.PARTIAL_FAILURE)

        return self._finish(report)

    def _finish(self, report: SaveReport, outcome: SaveOutcome | None = None) -> SaveReport:
        if outcome is not None:
            report.outcome = outcome
        report.errors = self.registry.errors
        self.outcome = report.outcome
        return report

    def _selected(self, force: bool) -> list[ServiceRecord]:
        return self.registry.records() if force else self.registry.modified_records()

    def toggle(self, record: ServiceRecord) -> bool:
        """Enable or disable one service according to its staged value."""
        if record.enabled:
            return self.gateway.enable(record.name).ok
        return self.gateway.disable(record.name).ok

    def switch(self, record: ServiceRecord) -> bool:
        """Start or stop one enabled service. Disabled services are left alone."""
        if not record.enabled:
            return True
        if record.active:
            return self.gateway.start(record.name).ok
        return self.gateway.stop(record.name).ok

    def toggle_services(self, records: list[ServiceRecord]) -> list[str]:
        toggled = []
        for record in records:
            if self.toggle(record):
                record.modified = False
                toggled.append(record.name)
            else:
                change = 'enable' if record.enabled else 'disable'
                message = f'Could not {change} {record.name}. '
                self.registry.add_error(message + self.registry.status(record.name))
        return toggled

    def switch_services(self, records: list[ServiceRecord]) -> list[str]:
        switched = []
        for record in records:
            if self.switch(record):
                record.modified = False
                switched.append(record.name)
            else:
                record.modified = True
                change = 'start' if record.active else 'stop'
                message = f'Could not {change} {record.name} which is currently enabled. '
                self.registry.add_error(message + self.registry.status(record.name))
        return switched
