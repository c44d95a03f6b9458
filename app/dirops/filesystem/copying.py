"""Single-file copy primitive.

Tries a hard link first and falls back to a content copy. Symlinks are
copied as links in both attempts. An existing destination is unlinked
before either attempt, so neither ever writes into its inode or through
its link.
"""

import logging
import os
import shutil
from collections.abc import Callable

logger = logging.getLogger(__name__)

CopyFile = Callable[[str, str], None]


def _same_entry(source: str, destination: str) -> bool:
    """Return True if both paths name the same inode, links not followed."""
    src = os.lstat(source)
    dst = os.lstat(destination)
    return (src.st_dev, src.st_ino) == (dst.st_dev, dst.st_ino)


def copy_file(source: str, destination: str) -> None:
    """Copy one file to a destination path.

    An existing destination that is not already the source entry is
    removed first. The fast path is then ``os.link``. When linking fails
    (cross-device link, unsupported filesystem) the file is copied with
    ``shutil.copy2``, which preserves metadata.

    Args:
        source: Path of the file to copy.
        destination: Full path of the new file.

    Raises:
        OSError: If the source is unreadable, the old destination cannot
            be removed, or both attempts fail.
    """
    if os.path.lexists(destination):
        if _same_entry(source, destination):
            return
        logger.debug("Removing existing destination %s", destination)
        os.remove(destination)

    try:
        os.link(source, destination, follow_symlinks=False)
        return
    except OSError as e:
        logger.debug("Hard link %s -> %s failed (%s), copying content", source, destination, e)

    shutil.copy2(source, destination, follow_symlinks=False)
