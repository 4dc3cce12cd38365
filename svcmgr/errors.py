from enum import Enum


class SvcmgrError(Exception):
    """Base class for errors raised by svcmgr."""


class LoadError(SvcmgrError):
    """Service listing could not be read or parsed."""


class TargetError(SvcmgrError):
    """Default target could not be read or changed."""


class ProfileError(SvcmgrError):
    """Enablement profile is unreadable or malformed."""


class ConfigError(SvcmgrError):
    """Config file is malformed."""


class SaveOutcome(str, Enum):
    SUCCESS = 'success'
    PARTIAL_FAILURE = 'partial_failure'
    REJECTED = 'rejected'
