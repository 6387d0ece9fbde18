"""
Local filesystem storage for rendered graph images.
Allocates unique destinations, writes images atomically and lists the graphs
generated so far.
"""

import os
import uuid
import logging
import tempfile
import contextlib
from typing import List, Dict, Any, Optional

import config
from error_handler import OutputError

logger = logging.getLogger('table_grapher.image_sink')


def _remove_directories(directories: List[str]) -> None:
    """Remove directories deepest first, leaving anything that is not empty."""
    for directory in directories:
        if os.path.isdir(directory):
            with contextlib.suppress(OSError):
                os.rmdir(directory)


def prepare_output_directory(directory: str) -> List[str]:
    """
    Make sure a directory exists, creating missing parents.

    Either the whole chain is created or nothing is: on failure any directory
    created by this call is removed again before OutputError is raised.

    Returns:
        The directories that were created, deepest first.
    """
    directory = os.path.abspath(directory)
    missing = []
    current = directory
    while not os.path.isdir(current):
        missing.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        _remove_directories(missing)
        raise OutputError(
            config.ERROR_MESSAGES['output_unwritable'].format(path=directory, reason=e)
        ) from e

    if missing:
        logger.info("Created output directory %s", directory)
    return missing


def cleanup_created_directories(directories: List[str]) -> None:
    """Undo prepare_output_directory after a failed render."""
    _remove_directories(directories)


def write_atomically(path: str, data: bytes) -> str:
    """
    Write bytes to path through a temporary file in the same directory.

    The destination only ever holds a complete image: the temporary file is
    moved into place with os.replace and removed if anything fails.
    """
    directory = os.path.dirname(os.path.abspath(path))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix='.graph_', suffix='.tmp', dir=directory)
    except OSError as e:
        raise OutputError(
            config.ERROR_MESSAGES['output_unwritable'].format(path=path, reason=e)
        ) from e

    try:
        with os.fdopen(fd, 'wb') as handle:
            handle.write(data)
        os.replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise OutputError(
            config.ERROR_MESSAGES['output_unwritable'].format(path=path, reason=e)
        ) from e

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path


class LocalImageSink:
    """Stores graph images below a base directory and builds public references."""

    def __init__(self, base_dir: Optional[str] = None, public_url_prefix: Optional[str] = None):
        self.base_dir = os.path.abspath(base_dir or config.graph_output_dir)
        prefix = config.graph_public_url_prefix if public_url_prefix is None else public_url_prefix
        self.public_url_prefix = prefix.rstrip('/')

    def allocate(self, name: Optional[str] = None) -> str:
        """Return a destination path for a new graph, unique unless name is given."""
        if not name:
            name = f"graph_{uuid.uuid4().hex}.png"
        return os.path.join(self.base_dir, name)

    def store(self, image, name: Optional[str] = None) -> str:
        """
        Persist an in-memory RenderedImage.

        Args:
            image: RenderedImage whose data holds the PNG bytes
            name: Optional file name below the base directory

        Returns:
            The path the image was written to
        """
        path = self.allocate(name)
        created = prepare_output_directory(os.path.dirname(path))
        try:
            write_atomically(path, image.data)
        except OutputError:
            cleanup_created_directories(created)
            raise
        image.path = path
        logger.info("Stored graph image at %s", path)
        return path

    def reference(self, path: str) -> str:
        """Build the public URL for a stored image, or a file URI outside the base directory."""
        absolute = os.path.abspath(path)
        if os.path.commonpath([absolute, self.base_dir]) != self.base_dir:
            return 'file://' + absolute.replace(os.sep, '/')
        relative = os.path.relpath(absolute, self.base_dir).replace(os.sep, '/')
        return f"{self.public_url_prefix}/{relative}"

    def list_graphs(self) -> List[Dict[str, Any]]:
        """Return every stored PNG with its URL and modification time, newest first."""
        if not os.path.isdir(self.base_dir):
            return []

        graphs = []
        for entry in os.scandir(self.base_dir):
            if entry.is_file() and entry.name.lower().endswith('.png'):
                graphs.append({
                    "path": entry.path,
                    "url": self.reference(entry.path),
                    "created_at": int(entry.stat().st_mtime),
                })

        graphs.sort(key=lambda graph: (graph["created_at"], graph["path"]), reverse=True)
        return graphs
