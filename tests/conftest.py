import pytest

from svcmgr.gateway import Gateway, RunResult
from svcmgr.loader import load

UNIT_FILES = 'sshd.service enabled\ncups.service disabled\n'
UNITS = 'sshd.service loaded active running sshd\ncups.service loaded inactive dead CUPS\n'

TARGETS = (
    'graphical.target loaded active active Graphical Interface\n'
    'multi-user.target loaded active active Multi-User System\n'
    'poweroff.target loaded inactive dead System Power Off\n'
    'sleep.target loaded inactive dead Sleep\n'
)
ISOLATABLE = {'graphical', 'multi-user', 'poweroff'}

ACTIONS = ('enable', 'disable', 'start', 'stop', 'set-default')


class FakeSystemctl:
    """Executor that answers systemctl commands from canned output and records every call."""

    def __init__(self, unit_files=UNIT_FILES, units=UNITS, fail=(), default='graphical.target', sockets=()):
        self.unit_files = unit_files
        self.sockets = set(sockets)
        self.units = units
        self.fail = set(fail)
        self.default = default
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(cmd)
        if cmd[0] == 'journalctl':
            units = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == '-u']
            return RunResult(stdout=''.join(f'-- {unit} started --\n' for unit in units), stderr='', returncode=0)
        args = cmd[1:]
        if args[0] == 'list-unit-files' and args[1].endswith('.socket'):
            socket = args[1] if args[1] in self.sockets else ''
            return RunResult(stdout=f'{socket} enabled enabled\n' if socket else '', stderr='', returncode=0)
        if args[0] == 'list-unit-files':
            return RunResult(stdout=self.unit_files, stderr='', returncode=0)
        if args[:3] == ['--all', '--type', 'service']:
            return RunResult(stdout=self.units, stderr='', returncode=0)
        if args[:3] == ['--all', '--type', 'target']:
            return RunResult(stdout=TARGETS, stderr='', returncode=0)
        if args[0] == 'show':
            blocks = []
            for unit in args[2:]:
                allow = 'yes' if unit.removesuffix('.target') in ISOLATABLE else 'no'
                blocks.append(f'Id={unit}\nAllowIsolate={allow}\n')
            return RunResult(stdout='\n'.join(blocks), stderr='', returncode=0)
        if args[0] == 'get-default':
            return RunResult(stdout=f'{self.default}\n', stderr='', returncode=0)
        if args[0] == 'status':
            return RunResult(stdout=f'● {args[1]} - status of {args[1]}\n', stderr='', returncode=3)
        if args[0] in ACTIONS:
            if (args[0], args[1]) in self.fail:
                return RunResult(stdout='', stderr=f'Failed to {args[0]} {args[1]}', returncode=1)
            return RunResult(stdout='', stderr='', returncode=0)
        return RunResult(stdout='', stderr='unknown command', returncode=1)

    def actions(self):
        """(verb, unit) pairs of every state-changing call, in order."""
        return [(cmd[1], cmd[2]) for cmd in self.calls if cmd[1] in ACTIONS]


@pytest.fixture
def systemctl() -> FakeSystemctl:
    return FakeSystemctl()


@pytest.fixture
def gateway(systemctl) -> Gateway:
    return Gateway(systemctl)


@pytest.fixture
def registry(gateway):
    return load(gateway)
