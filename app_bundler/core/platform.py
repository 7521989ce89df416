"""
Host platform detection and per-platform packaging requirements
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from app_bundler.core.app_info import BundleFormat
from app_bundler.generators.icons import IconResizeOptions
from app_bundler.utils.system import get_system_info

logger = logging.getLogger(__name__)

# Default format first, then the alternates a BuildConfig may select
PLATFORM_FORMATS = {
    'macos': [BundleFormat.APP, BundleFormat.DMG, BundleFormat.PKG],
    'windows': [BundleFormat.MSIX, BundleFormat.ZIP],
    'linux': [BundleFormat.APPIMAGE, BundleFormat.TARBALL, BundleFormat.ZIP],
}

# Used when the host OS is not one we package for
FALLBACK_FORMAT = BundleFormat.ZIP

PLATFORM_ALIASES = {
    'macos': 'macos',
    'darwin': 'macos',
    'osx': 'macos',
    'mac': 'macos',
    'windows': 'windows',
    'win32': 'windows',
    'win': 'windows',
    'linux': 'linux',
}

# Required icon sizes, smallest first
ICON_SIZES = {
    # .icns / Assets.xcassets, 16pt to 512pt@2x
    'macos': [16, 32, 64, 128, 256, 512, 1024],
    # MSIX visual assets at the 100%..400% scale factors
    'windows': [44, 50, 55, 66, 88, 100, 150, 176, 188, 225, 300, 600],
    # hicolor theme PNG directories
    'linux': [16, 32, 48, 64, 128, 256, 512],
}


@dataclass(frozen=True)
class PlatformInfo:
    """Host platform as seen by the bundler"""

    os: str
    arch: str
    bundle_format: BundleFormat
    supported: bool

    def to_dict(self) -> Dict:
        """Convert to the external field shape"""
        return {
            'os': self.os,
            'arch': self.arch,
            'bundleFormat': self.bundle_format.value,
            'supported': self.supported,
        }


def normalize_platform(name) -> Optional[str]:
    """Return the canonical platform key or None when unknown"""
    if not isinstance(name, str):
        return None
    return PLATFORM_ALIASES.get(name.strip().lower())


def default_bundle_format(os_name) -> BundleFormat:
    """Default bundle format for an OS, Zip for anything unknown"""
    key = normalize_platform(os_name)
    if key is None:
        return FALLBACK_FORMAT
    return PLATFORM_FORMATS[key][0]


def alternate_formats(os_name) -> List[BundleFormat]:
    """Formats other than the default that an OS can be packaged as"""
    key = normalize_platform(os_name)
    if key is None:
        return []
    return list(PLATFORM_FORMATS[key][1:])


def get_platform_info(system_info=None) -> PlatformInfo:
    """Describe the host platform. Unknown systems are reported, not rejected."""
    if system_info is None:
        system_info = get_system_info()

    os_name = system_info['os']
    key = normalize_platform(os_name)
    info = PlatformInfo(
        os=os_name,
        arch=system_info['arch'],
        bundle_format=default_bundle_format(os_name),
        supported=key is not None,
    )

    if not info.supported:
        logger.warning("Platform %s is not supported, falling back to %s",
                       os_name, info.bundle_format.value)
    logger.debug("platform_info: %s", info)
    return info


def get_icon_requirements(platform) -> List[IconResizeOptions]:
    """Icon sizes required by a platform. Unknown platforms get an empty list."""
    logger.debug("icon_requirements: %s", platform)

    key = normalize_platform(platform)
    if key is None:
        return []

    return [IconResizeOptions(width=size, height=size) for size in ICON_SIZES[key]]
