"""Build the service registry from systemctl listings."""

import logging

from svcmgr.constants import ACTIVE, ENABLED, LOADED, SERVICE_SUFFIX, SUPPORTED_STATES
from svcmgr.errors import LoadError
from svcmgr.gateway import Gateway, RunResult, strip_suffix
from svcmgr.registry import Registry, ServiceRecord

logger = logging.getLogger(__name__)

# systemd prefixes failed or not-found units with a status bullet
BULLETS = ('●', '*', '○', '×')


def _split(line: str) -> list[str]:
    parts = line.split()
    if parts and parts[0] in BULLETS:
        parts = parts[1:]
    return parts


def _check(result: RunResult, what: str) -> str:
    if not result.ok:
        raise LoadError(f'Could not list {what} (exit code {result.returncode}): {result.stderr.strip()}')
    return result.stdout


def parse_unit_files(stdout: str) -> dict[str, bool]:
    """Parse 'list-unit-files' output into {name: enabled}.

    Only enabled/disabled units are kept; static, masked and the rest are skipped.
    """
    services = {}
    for line in stdout.splitlines():
        parts = _split(line)
        if not parts:
            continue
        if len(parts) < 2 or not parts[0].endswith(SERVICE_SUFFIX):
            raise LoadError(f'Unexpected unit file line: {line!r}')
        unit, state = parts[0], parts[1]
        if state in SUPPORTED_STATES:
            services[strip_suffix(unit)] = state == ENABLED
    return services


def parse_units(stdout: str) -> dict[str, tuple[bool, bool, str]]:
    """Parse unit detail output into {name: (loaded, active, description)}."""
    details = {}
    for line in stdout.splitlines():
        parts = _split(line)
        if not parts:
            continue
        if len(parts) < 4 or not parts[0].endswith(SERVICE_SUFFIX):
            raise LoadError(f'Unexpected unit line: {line!r}')
        unit, loaded, active, _sub, *description = parts
        details[strip_suffix(unit)] = (loaded == LOADED, active == ACTIVE, ' '.join(description))
    return details


def read_services(gateway: Gateway) -> list[ServiceRecord]:
    """Query systemd and return one record per enabled/disabled service."""
    enablement = parse_unit_files(_check(gateway.list_unit_files(), 'unit files'))
    details = parse_units(_check(gateway.list_units(), 'units'))

    records = []
    for name, enabled in enablement.items():
        record = ServiceRecord(name=name, enabled=enabled)
        if name in details:
            record.loaded, record.active, record.description = details[name]
        records.append(record)

    logger.info('Services loaded: %s', ', '.join(sorted(enablement)))
    return records


def load(gateway: Gateway, registry: Registry | None = None) -> Registry:
    """Fill (or refresh) a registry from the system.

    On LoadError the given registry keeps its previous contents.
    """
    records = read_services(gateway)
    if registry is None:
        return Registry(gateway, records)
    registry.replace(records)
    return registry
