"""Operator intents, decoded once at the command line and applied to a registry."""

from dataclasses import dataclass

from svcmgr.registry import Registry, StartMode


@dataclass(frozen=True)
class Enable:
    service: str

    def apply(self, registry: Registry):
        registry.enable(self.service)


@dataclass(frozen=True)
class Disable:
    service: str

    def apply(self, registry: Registry):
        registry.disable(self.service)


@dataclass(frozen=True)
class Activate:
    service: str

    def apply(self, registry: Registry):
        registry.activate(self.service)


@dataclass(frozen=True)
class Deactivate:
    service: str

    def apply(self, registry: Registry):
        registry.deactivate(self.service)


@dataclass(frozen=True)
class ToggleEnablement:
    service: str

    def apply(self, registry: Registry):
        registry.toggle_enablement(self.service)


@dataclass(frozen=True)
class ToggleActivity:
    service: str

    def apply(self, registry: Registry):
        registry.toggle_activity(self.service)


@dataclass(frozen=True)
class SetStartMode:
    service: str
    mode: StartMode

    def apply(self, registry: Registry):
        registry.set_start_mode(self.service, self.mode)


Action = Enable | Disable | Activate | Deactivate | ToggleEnablement | ToggleActivity | SetStartMode

# Actions that change enablement, refused for units that failed to load
ENABLEMENT_ACTIONS = (Enable, Disable, ToggleEnablement, SetStartMode)

COMMANDS: dict[str, type] = {
    'enable': Enable,
    'disable': Disable,
    'start': Activate,
    'stop': Deactivate,
    'toggle': ToggleEnablement,
    'switch': ToggleActivity,
}


def decode(command: str, services: list[str]) -> list[Action]:
    """Turn a command name and its arguments into actions."""
    try:
        action = COMMANDS[command]
    except KeyError:
        raise ValueError(f'Unknown command: {command}') from None
    return [action(service) for service in services]


def apply_all(registry: Registry, actions: list[Action]) -> list[Action]:
    """Apply actions in order. Returns the ones that were refused."""
    refused = []
    for action in actions:
        known = action.service in registry
        if known and isinstance(action, ENABLEMENT_ACTIONS) and not registry.can_be_toggled(action.service):
            refused.append(action)
            continue
        action.apply(registry)
    return refused
