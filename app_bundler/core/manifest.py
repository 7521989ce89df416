"""
Manifest parsing and caching
"""

import logging
import threading
import tomllib
from typing import Dict, Optional

from app_bundler.core.app_info import AppManifest
from app_bundler.core.errors import ManifestValidationError
from app_bundler.validators.validators import (validate_identifier, validate_required_string,
                                               validate_optional_string)
from app_bundler.utils.file_ops import join
from app_bundler.utils.system import sanitize_name
from app_bundler.utils.i18n import _

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.app.toml"


def manifest_path(app_dir) -> str:
    """Path of the manifest inside an app directory"""
    logger.debug("manifest_path: %s", app_dir)
    return join([str(app_dir), MANIFEST_FILENAME])


def _table(raw: Dict, key: str) -> Dict:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def parse_manifest(content) -> AppManifest:
    """Parse manifest.app.toml content.

    Fields are read from the top level of the document. Manifests that keep
    them in an ``[app]`` table, with the icon under ``[bundle]``, are read
    too; top-level keys take precedence.
    """
    logger.debug("manifest_parse")

    if isinstance(content, (bytes, bytearray)):
        try:
            content = bytes(content).decode('utf-8')
        except UnicodeDecodeError as e:
            raise ManifestValidationError(
                _("Manifest is not valid UTF-8: {}").format(e)) from e

    try:
        raw = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestValidationError(_("Failed to parse manifest: {}").format(e)) from e

    fields = dict(_table(raw, 'app'))
    for key in ('name', 'identifier', 'version'):
        if key in raw:
            fields[key] = raw[key]

    if 'icon' in raw:
        fields['icon'] = raw['icon']
    elif 'icon' in _table(raw, 'bundle'):
        fields['icon'] = _table(raw, 'bundle')['icon']

    name = validate_required_string(fields, 'name')
    version = validate_required_string(fields, 'version')

    identifier = fields.get('identifier')
    if identifier is None:
        identifier = sanitize_name(name)
        logger.debug("manifest_parse: derived identifier %s from %r", identifier, name)
    else:
        validate_identifier(identifier)

    return AppManifest(
        name=name,
        identifier=identifier,
        version=version,
        icon=validate_optional_string(fields, 'icon'),
    )


def load_manifest(path) -> AppManifest:
    """Read and parse a manifest file"""
    logger.debug("manifest_load: %s", path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestValidationError(
            _("Failed to read manifest {}: {}").format(path, e)) from e

    return parse_manifest(content)


class ManifestCache:
    """Parsed manifests keyed by the exact path string they were stored under.

    Entries are never invalidated: a manifest edited on disk keeps being
    served until it is cached again under the same key.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._manifests: Dict[str, AppManifest] = {}

    def put(self, path, manifest: AppManifest):
        """Cache a manifest, replacing any entry under the same key"""
        if not isinstance(manifest, AppManifest):
            raise TypeError(_("Expected AppManifest, got {}").format(type(manifest).__name__))
        logger.debug("cache_manifest: %s", path)
        with self._lock:
            self._manifests[str(path)] = manifest

    def get(self, path) -> Optional[AppManifest]:
        """Cached manifest for a key, or None"""
        logger.debug("get_cached_manifest: %s", path)
        with self._lock:
            return self._manifests.get(str(path))

    def __contains__(self, path):
        with self._lock:
            return str(path) in self._manifests

    def __len__(self):
        with self._lock:
            return len(self._manifests)
