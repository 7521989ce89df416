"""
Path helpers: textual joins and side-effect-free path probes
"""

import os
import re
import stat
import logging
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathInfo:
    """Result of a single filesystem probe"""

    path: str
    exists: bool = False
    is_dir: bool = False
    is_file: bool = False
    extension: Optional[str] = None
    file_name: Optional[str] = None
    parent: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert to the external field shape"""
        return {
            'path': self.path,
            'exists': self.exists,
            'isDir': self.is_dir,
            'isFile': self.is_file,
            'extension': self.extension,
            'fileName': self.file_name,
            'parent': self.parent,
        }


def _separator_pattern():
    seps = {os.sep}
    if os.altsep:
        seps.add(os.altsep)
    return '[' + ''.join(re.escape(s) for s in sorted(seps)) + ']{2,}'


def join(components):
    """Join path components with the host separator.

    This is a textual join: empty components are skipped and runs of
    separators are collapsed, but '.' and '..' are left in place and no
    symlinks are resolved. An absolute component discards everything
    before it, as os.path.join does.
    """
    parts = [str(c) for c in components if c is not None and str(c) != '']
    if not parts:
        return ''

    joined = os.path.join(*parts)

    # Keep a UNC prefix (\\server) intact on Windows
    prefix = ''
    if os.name == 'nt' and joined[:2] in ('\\\\', '//'):
        prefix, joined = joined[:2], joined[2:]

    return prefix + re.sub(_separator_pattern(), os.sep, joined)


def path_info(path) -> PathInfo:
    """Probe a path once. Any OS failure is reported as a missing path."""
    path = str(path)
    logger.debug("path_info: %s", path)

    trimmed = path.rstrip(os.sep + (os.altsep or '')) or path
    file_name = os.path.basename(trimmed) or None
    parent = os.path.dirname(trimmed) or None
    if parent == trimmed:
        parent = None

    extension = None
    if file_name:
        ext = os.path.splitext(file_name)[1]
        extension = ext[1:] if ext else None

    try:
        st = os.stat(path)
    except (OSError, ValueError) as e:
        logger.debug("path_info: %s not accessible: %s", path, e)
        return PathInfo(path=path, extension=extension,
                        file_name=file_name, parent=parent)

    return PathInfo(
        path=path,
        exists=True,
        is_dir=stat.S_ISDIR(st.st_mode),
        is_file=stat.S_ISREG(st.st_mode),
        extension=extension,
        file_name=file_name,
        parent=parent,
    )
