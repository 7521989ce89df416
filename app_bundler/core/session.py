"""
Build session - owns the state of one bundling run
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from app_bundler.core.app_info import AppManifest, BuildConfig, BundleFormat
from app_bundler.core.build_config import BuildConfigStore
from app_bundler.core.errors import InvalidOptionsError
from app_bundler.core.manifest import ManifestCache, load_manifest, manifest_path
from app_bundler.core.platform import PlatformInfo, get_icon_requirements, get_platform_info
from app_bundler.generators.icons import (MAX_ICON_BYTES, IconResizeOptions, IconValidation,
                                          generate_icon_set, validate_icon)
from app_bundler.utils.i18n import _

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class BuildSession:
    """Manifest cache and build configuration of one pipeline invocation.

    Each session has its own state, so several builds can run in one
    process without seeing each other's app directory, configuration or
    cached manifests.
    """

    def __init__(self, settings=None, system_info: Optional[Dict[str, str]] = None):
        self.settings = settings
        self.system_info = system_info
        self.manifests = ManifestCache()
        self.store = BuildConfigStore()
        self.progress_callback = None
        self.log_callback = None

    def set_progress_callback(self, callback: Callable[[int, str], None]):
        """Set progress callback function"""
        self.progress_callback = callback

    def set_log_callback(self, callback: Callable[[str], None]):
        """Set log callback function"""
        self.log_callback = callback

    def log(self, message: str):
        """Log a message"""
        logger.info(message)
        if self.log_callback:
            try:
                self.log_callback(message)
            except Exception:
                logger.exception("Log callback failed")

    def update_progress(self, percentage: int, message: str):
        """Update progress"""
        if self.progress_callback:
            try:
                self.progress_callback(percentage, message)
            except Exception:
                logger.exception("Progress callback failed")

    def _setting(self, key, default):
        if self.settings is None:
            return default
        value = self.settings.get(key)
        return default if value is None else value

    # App directory and build configuration

    def set_app_dir(self, path):
        self.store.set_app_dir(path)

    def get_app_dir(self) -> Optional[str]:
        return self.store.get_app_dir()

    def set_build_config(self, config: BuildConfig):
        self.store.set_build_config(config)

    def get_build_config(self) -> Optional[BuildConfig]:
        return self.store.get_build_config()

    # Manifests

    def cache_manifest(self, path, manifest: AppManifest):
        self.manifests.put(path, manifest)

    def get_cached_manifest(self, path) -> Optional[AppManifest]:
        return self.manifests.get(path)

    def manifest_path(self, app_dir=None) -> str:
        """Manifest path for app_dir, or for the current app directory"""
        if app_dir is None:
            app_dir = self.get_app_dir()
        if app_dir is None:
            raise InvalidOptionsError(_("No app directory has been set"))
        return manifest_path(app_dir)

    def resolve_manifest(self, app_dir=None) -> AppManifest:
        """Return the cached manifest, loading and caching it on a miss"""
        path = self.manifest_path(app_dir)

        manifest = self.get_cached_manifest(path)
        if manifest is not None:
            logger.debug("Manifest cache hit: %s", path)
            return manifest

        self.log(_("Loading manifest: {}").format(path))
        manifest = load_manifest(path)
        self.cache_manifest(path, manifest)
        return manifest

    # Platform

    def platform_info(self) -> PlatformInfo:
        return get_platform_info(self.system_info)

    def resolve_format(self) -> BundleFormat:
        """Configured bundle format, or the host platform default"""
        config = self.get_build_config()
        if config is not None and config.format is not None:
            return config.format
        return self.platform_info().bundle_format

    def icon_requirements(self, platform=None) -> List[IconResizeOptions]:
        """Icon sizes for a platform, the host platform by default"""
        if platform is None:
            platform = self.platform_info().os
        return get_icon_requirements(platform)

    # Icons

    def prepare_icons(self, data, platform=None) -> Tuple[IconValidation, Dict[IconResizeOptions, bytes]]:
        """Validate a source icon and resize it to every size the platform needs.

        No icons are produced when the source fails validation; the
        returned validation tells the caller why.
        """
        max_bytes = self._setting('max-icon-bytes', MAX_ICON_BYTES)

        self.update_progress(10, _("Validating icon"))
        validation = validate_icon(data, max_bytes=max_bytes)
        for warning in validation.warnings:
            self.log(_("Warning: {}").format(warning))
        if validation.errors:
            for error in validation.errors:
                self.log(_("Error: {}").format(error))
            self.update_progress(100, _("Icon rejected"))
            return validation, {}

        requirements = self.icon_requirements(platform)
        if not requirements:
            self.log(_("No icon requirements for platform {}").format(platform))

        self.update_progress(30, _("Resizing icons"))
        icons = generate_icon_set(
            data, requirements,
            max_workers=self._setting('max-workers', DEFAULT_MAX_WORKERS),
            max_bytes=max_bytes,
        )
        self.update_progress(100, _("Icons ready"))
        return validation, icons
