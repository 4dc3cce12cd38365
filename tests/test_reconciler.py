"""
Tests for the two-phase save protocol.
"""

import pytest

from svcmgr.errors import SaveOutcome
from svcmgr.gateway import Gateway
from svcmgr.loader import load
from svcmgr.reconciler import Reconciler

from conftest import FakeSystemctl

THREE_UNIT_FILES = 'a.service disabled\nb.service disabled\nc.service disabled\n'
THREE_UNITS = (
    'a.service loaded inactive dead A\n'
    'b.service loaded inactive dead B\n'
    'c.service loaded inactive dead C\n'
)


@pytest.fixture
def three():
    fake = FakeSystemctl(unit_files=THREE_UNIT_FILES, units=THREE_UNITS, fail={('enable', 'b.service')})
    registry = load(Gateway(fake))
    for name in ('a', 'b', 'c'):
        registry.enable(name)
        registry.activate(name)
    return fake, registry


def test_nothing_modified_makes_no_calls(registry, systemctl):
    reconciler = Reconciler(registry)
    assert reconciler.save(force=False, switch=True) is True
    assert systemctl.actions() == []
    assert reconciler.outcome is SaveOutcome.SUCCESS


def test_partial_failure_in_toggle_phase(three):
    fake, registry = three

    assert Reconciler(registry).save(force=False, switch=True) is False

    assert fake.actions() == [('enable', 'a.service'), ('enable', 'b.service'), ('enable', 'c.service')]
    assert len(registry.errors) == 1
    assert registry.errors[0].startswith('Could not enable b. ')
    assert '● b.service - status of b.service' in registry.errors[0]
    assert not registry.get('a').modified
    assert registry.get('b').modified
    assert not registry.get('c').modified


def test_toggle_failure_skips_switch_phase(three):
    fake, registry = three

    report = Reconciler(registry).commit(switch=True)

    assert report.outcome is SaveOutcome.PARTIAL_FAILURE
    assert report.toggled == ['a', 'c']
    assert report.switched == []
    assert not [verb for verb, _ in fake.actions() if verb in ('start', 'stop')]


def test_pending_errors_reject_save(three):
    fake, registry = three
    reconciler = Reconciler(registry)
    reconciler.save()
    calls = len(fake.calls)

    assert reconciler.save() is False
    assert reconciler.outcome is SaveOutcome.REJECTED
    assert len(fake.calls) == calls


def test_retry_after_reset_needs_force_for_failed_record(three):
    fake, registry = three
    reconciler = Reconciler(registry)
    reconciler.save(switch=False)
    registry.reset()
    fake.fail.clear()
    fake.calls.clear()

    assert reconciler.save(force=True, switch=False) is True
    assert fake.actions() == [('enable', 'a.service'), ('enable', 'b.service'), ('enable', 'c.service')]


def test_switch_phase_starts_enabled_services(registry, systemctl):
    registry.enable('cups')
    registry.activate('cups')

    report = Reconciler(registry).commit()

    assert report.ok
    assert systemctl.actions() == [('enable', 'cups.service'), ('start', 'cups.service')]
    assert report.switched == ['cups']
    assert not registry.modified


def test_disabled_service_is_never_started(registry, systemctl):
    registry.activate('cups')

    assert Reconciler(registry).save() is True
    assert systemctl.actions() == [('disable', 'cups.service')]


def test_switch_false_skips_start_stop(registry, systemctl):
    registry.deactivate('sshd')

    assert Reconciler(registry).save(switch=False) is True
    assert systemctl.actions() == [('enable', 'sshd.service')]


def test_switch_failure_keeps_record_modified():
    fake = FakeSystemctl(fail={('stop', 'sshd.service')})
    registry = load(Gateway(fake))
    registry.deactivate('sshd')

    reconciler = Reconciler(registry)
    assert reconciler.save() is False

    assert reconciler.outcome is SaveOutcome.PARTIAL_FAILURE
    assert registry.errors[0].startswith('Could not stop sshd which is currently enabled. ')
    assert registry.get('sshd').modified


def test_force_writes_every_service_in_name_order(registry, systemctl):
    assert Reconciler(registry).save(force=True, switch=False) is True
    assert systemctl.actions() == [('disable', 'cups.service'), ('enable', 'sshd.service')]
