"""
Tests for building the registry from systemctl listings.
"""

import pytest

from svcmgr.errors import LoadError
from svcmgr.gateway import Gateway, RunResult
from svcmgr.loader import load, parse_unit_files, parse_units

from conftest import FakeSystemctl


def test_load_two_services(registry):
    assert registry.names() == ['cups', 'sshd']

    sshd = registry.get('sshd')
    assert (sshd.enabled, sshd.active, sshd.loaded) == (True, True, True)
    assert sshd.description == 'sshd'

    cups = registry.get('cups')
    assert (cups.enabled, cups.active, cups.loaded) == (False, False, True)
    assert cups.description == 'CUPS'

    assert not registry.modified
    assert registry.errors == ()


def test_parse_unit_files_skips_unsupported_states():
    stdout = (
        'sshd.service enabled enabled\n'
        'cups.service disabled enabled\n'
        'dbus.service static -\n'
        'foo.service masked enabled\n'
        '\n'
    )
    assert parse_unit_files(stdout) == {'sshd': True, 'cups': False}


def test_parse_units_joins_description():
    stdout = '● nfs.service   not-found inactive dead    NFS   server and services\n'
    assert parse_units(stdout) == {'nfs': (False, False, 'NFS server and services')}


def test_details_for_unknown_units_are_ignored():
    fake = FakeSystemctl(units='sshd.service loaded active running sshd\nextra.service loaded active running Extra\n')
    registry = load(Gateway(fake))
    assert registry.names() == ['cups', 'sshd']
    assert registry.get('extra') is None


def test_unit_without_details_is_not_loaded():
    fake = FakeSystemctl(units='sshd.service loaded active running sshd\n')
    cups = load(Gateway(fake)).get('cups')
    assert cups.loaded is False
    assert cups.active is False
    assert cups.description == ''


@pytest.mark.parametrize('stdout', ['sshd.service\n', 'garbage line here\n'])
def test_malformed_unit_files_raise(stdout):
    with pytest.raises(LoadError):
        parse_unit_files(stdout)


def test_malformed_units_raise():
    with pytest.raises(LoadError):
        parse_units('sshd.service loaded\n')


def test_failed_listing_keeps_previous_snapshot(registry):
    registry.disable('sshd')

    def broken(cmd):
        return RunResult(stdout='', stderr='Failed to connect to bus', returncode=1)

    with pytest.raises(LoadError, match='Failed to connect to bus'):
        load(Gateway(broken), registry)

    assert registry.names() == ['cups', 'sshd']
    assert registry.get('sshd').modified


def test_reload_drops_staged_changes(registry, gateway):
    registry.disable('sshd')
    assert registry.modified

    load(gateway, registry)

    assert registry.is_enabled('sshd') is True
    assert not registry.modified
