"""
Application manifest and build configuration data classes
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

from app_bundler.core.errors import InvalidOptionsError
from app_bundler.utils.i18n import _


class BundleFormat(str, Enum):
    """Packaging container types a bundle producer can emit"""

    APP = "App"            # macOS .app bundle
    DMG = "Dmg"            # macOS .dmg disk image
    PKG = "Pkg"            # macOS .pkg installer
    MSIX = "Msix"          # Windows .msix package
    APPIMAGE = "AppImage"  # Linux AppImage
    TARBALL = "Tarball"    # Compressed tarball
    ZIP = "Zip"            # ZIP archive

    @classmethod
    def parse(cls, value) -> "BundleFormat":
        """Accept a BundleFormat or its name in any letter case"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidOptionsError(
            _("Unknown bundle format '{}'. Expected one of: {}").format(
                value, ', '.join(m.value for m in cls)))


@dataclass(frozen=True)
class AppManifest:
    """Parsed contents of manifest.app.toml"""

    name: str
    identifier: str
    version: str
    icon: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert to the external field shape"""
        data = {
            'name': self.name,
            'identifier': self.identifier,
            'version': self.version,
        }
        if self.icon is not None:
            data['icon'] = self.icon
        return data


@dataclass(frozen=True)
class BuildConfig:
    """Resolved choices that drive the external bundle producer"""

    app_dir: str
    output_dir: Optional[str] = None
    # None means "use the platform default"
    format: Optional[BundleFormat] = None
    sign: bool = False
    signing_identity: Optional[str] = None

    def __post_init__(self):
        if self.format is not None and not isinstance(self.format, BundleFormat):
            object.__setattr__(self, 'format', BundleFormat.parse(self.format))

    def with_format(self, bundle_format) -> "BuildConfig":
        """Return a copy targeting another format"""
        return replace(self, format=BundleFormat.parse(bundle_format))

    def to_dict(self) -> Dict:
        """Convert to the external field shape"""
        return {
            'appDir': self.app_dir,
            'outputDir': self.output_dir,
            'format': self.format.value if self.format else None,
            'sign': self.sign,
            'signingIdentity': self.signing_identity,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "BuildConfig":
        if not data.get('appDir'):
            raise InvalidOptionsError(_("Build configuration requires appDir"))
        return cls(
            app_dir=str(data['appDir']),
            output_dir=data.get('outputDir'),
            format=data.get('format'),
            sign=bool(data.get('sign', False)),
            signing_identity=data.get('signingIdentity'),
        )
