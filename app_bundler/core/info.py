"""
Extension information
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Dict

CAPABILITIES = [
    'icon_create',
    'icon_validate',
    'icon_resize',
    'manifest_parse',
    'platform_info',
]


def get_bundler_info() -> Dict:
    """Name, version and capabilities of the bundling core"""
    try:
        pkg_version = version('app-bundler')
    except PackageNotFoundError:
        pkg_version = '0.0.0'

    return {
        'name': 'app_bundler',
        'version': pkg_version,
        'capabilities': list(CAPABILITIES),
    }
