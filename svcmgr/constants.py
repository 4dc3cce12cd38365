from pathlib import Path

CONFIG_DIR = Path.home() / '.config' / 'svcmgr'
CONFIG_FILE = CONFIG_DIR / 'config.yaml'
PROFILE_FILE = CONFIG_DIR / 'profile.yaml'

SERVICE_SUFFIX = '.service'
TARGET_SUFFIX = '.target'

# Keep systemctl output plain and untruncated
SYSTEMCTL_ENV = {'LANG': 'C', 'TERM': 'dumb', 'COLUMNS': '1024'}
SYSTEMCTL_OPTIONS = ['--no-legend', '--no-pager', '--no-ask-password']

LOADED = 'loaded'
ACTIVE = 'active'
ENABLED = 'enabled'
DISABLED = 'disabled'
SUPPORTED_STATES = (ENABLED, DISABLED)

# Targets never offered as the default boot target
HIDDEN_TARGETS = ('poweroff', 'reboot', 'halt', 'kexec', 'exit', 'rescue', 'emergency')
