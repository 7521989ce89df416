"""
Holds the current app directory and build configuration of a build
"""

import logging
import threading
from typing import Optional

from app_bundler.core.app_info import BuildConfig
from app_bundler.utils.i18n import _

logger = logging.getLogger(__name__)


class BuildConfigStore:
    """Two independent slots, each replaced wholesale. Last writer wins."""

    def __init__(self):
        self._lock = threading.Lock()
        self._app_dir: Optional[str] = None
        self._build_config: Optional[BuildConfig] = None

    def set_app_dir(self, path):
        """Set the app directory being bundled"""
        logger.debug("set_app_dir: %s", path)
        with self._lock:
            self._app_dir = str(path)

    def get_app_dir(self) -> Optional[str]:
        """Current app directory, or None if never set"""
        with self._lock:
            return self._app_dir

    def set_build_config(self, config: BuildConfig):
        """Replace the build configuration"""
        if not isinstance(config, BuildConfig):
            raise TypeError(_("Expected BuildConfig, got {}").format(type(config).__name__))
        logger.debug("set_build_config: app_dir=%s format=%s", config.app_dir, config.format)
        with self._lock:
            self._build_config = config

    def get_build_config(self) -> Optional[BuildConfig]:
        """Current build configuration, or None if never set"""
        with self._lock:
            return self._build_config
