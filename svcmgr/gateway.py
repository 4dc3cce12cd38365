"""systemctl and journalctl access through a swappable executor."""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Protocol

from svcmgr.constants import SERVICE_SUFFIX, SYSTEMCTL_ENV, SYSTEMCTL_OPTIONS, TARGET_SUFFIX

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Captured result of one command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Executor(Protocol):
    def __call__(self, cmd: list[str]) -> RunResult: ...


def make_executor(timeout: int = 90) -> Executor:
    """Executor that runs commands via subprocess with a C locale and no pager."""
    env = {**os.environ, **SYSTEMCTL_ENV}

    def run(cmd: list[str]) -> RunResult:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            return RunResult(stdout='', stderr=f'Command timed out after {e.timeout}s', returncode=-1)
        except FileNotFoundError:
            return RunResult(stdout='', stderr=f'Command not found: {cmd[0]}', returncode=127)
        return RunResult(stdout=result.stdout or '', stderr=result.stderr or '', returncode=result.returncode)

    return run


def service_unit(name: str) -> str:
    return f'{name}{SERVICE_SUFFIX}'


def strip_suffix(unit: str, suffix: str = SERVICE_SUFFIX) -> str:
    """Turn 'sshd.service' into 'sshd'; other names are returned as is."""
    return unit[: -len(suffix)] if unit.endswith(suffix) else unit


class Gateway:
    """Runs systemctl commands for services and targets."""

    def __init__(self, executor: Executor | None = None, timeout: int = 90):
        self.executor = executor or make_executor(timeout)

    def systemctl(self, *args: str) -> RunResult:
        cmd = ['systemctl', *args]
        logger.debug('Running %s', ' '.join(cmd))
        result = self.executor(cmd)
        if not result.ok:
            logger.debug('%s exited with %s: %s', ' '.join(cmd), result.returncode, result.stderr.strip())
        return result

    # Listings

    def list_unit_files(self) -> RunResult:
        """One line per service unit: '<name>.service <state> ...'."""
        return self.systemctl('list-unit-files', '--type', 'service', *SYSTEMCTL_OPTIONS)

    def list_units(self) -> RunResult:
        """One line per service unit: '<name>.service <load> <active> <sub> <description...>'."""
        return self.systemctl('--all', '--type', 'service', *SYSTEMCTL_OPTIONS)

    # Actions

    def enable(self, name: str) -> RunResult:
        return self.systemctl('enable', service_unit(name))

    def disable(self, name: str) -> RunResult:
        return self.systemctl('disable', service_unit(name))

    def start(self, name: str) -> RunResult:
        return self.systemctl('start', service_unit(name))

    def stop(self, name: str) -> RunResult:
        return self.systemctl('stop', service_unit(name))

    def status(self, name: str) -> str:
        """Full unformatted status text, stderr included."""
        result = self.systemctl('status', service_unit(name), '--no-pager')
        return result.stdout + result.stderr

    def has_socket(self, name: str) -> bool:
        result = self.systemctl('list-unit-files', f'{name}.socket', *SYSTEMCTL_OPTIONS)
        return result.ok and bool(result.stdout.strip())

    def journal(self, name: str) -> str:
        """Log entries from the current boot, including the socket unit when there is one."""
        cmd = ['journalctl', '-b', '--no-pager', '-u', service_unit(name)]
        if self.has_socket(name):
            cmd.extend(['-u', f'{name}.socket'])
        logger.debug('Running %s', ' '.join(cmd))
        result = self.executor(cmd)
        return result.stdout + result.stderr

    # Targets

    def list_targets(self) -> RunResult:
        return self.systemctl('--all', '--type', 'target', *SYSTEMCTL_OPTIONS)

    def show_targets(self, names: list[str]) -> RunResult:
        units = [f'{name}{TARGET_SUFFIX}' for name in names]
        return self.systemctl('show', '--property=Id,AllowIsolate', *units)

    def get_default(self) -> RunResult:
        return self.systemctl('get-default')

    def set_default(self, name: str) -> RunResult:
        return self.systemctl('set-default', f'{name}{TARGET_SUFFIX}')
