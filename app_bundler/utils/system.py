"""
System utilities and helpers
"""

import re
import sys
import platform
from typing import Dict

# Identifier used when a name sanitizes down to nothing
FALLBACK_NAME = 'app'

# Normalized machine names, keyed by what platform.machine() reports
_ARCH_ALIASES = {
    'amd64': 'x86_64',
    'x64': 'x86_64',
    'x86_64': 'x86_64',
    'i386': 'x86',
    'i686': 'x86',
    'x86': 'x86',
    'arm64': 'aarch64',
    'aarch64': 'aarch64',
    'armv7l': 'arm',
}


def detect_os(sys_platform=None):
    """Map sys.platform onto the OS names used for bundling"""
    sys_platform = (sys_platform or sys.platform).lower()

    if sys_platform == 'darwin':
        return 'macos'
    if sys_platform in ('win32', 'cygwin', 'msys'):
        return 'windows'
    if sys_platform.startswith('linux'):
        return 'linux'
    return sys_platform


def detect_arch(machine=None):
    """Normalize the host machine architecture"""
    if machine is None:
        machine = platform.machine()
    if not machine:
        return 'unknown'
    return _ARCH_ALIASES.get(machine.lower(), machine.lower())


def get_system_info() -> Dict[str, str]:
    """Get host information used to pick a bundle format"""
    return {
        'os': detect_os(),
        'arch': detect_arch(),
    }


def sanitize_name(name):
    """Sanitize a display name for use as an executable name or identifier"""
    # Replace every character outside [a-z0-9] with a hyphen
    sanitized = re.sub(r'[^a-z0-9]', '-', (name or '').lower())
    # Remove multiple hyphens
    sanitized = re.sub(r'-+', '-', sanitized)
    # Remove leading/trailing hyphens
    sanitized = sanitized.strip('-')

    return sanitized if sanitized else FALLBACK_NAME
