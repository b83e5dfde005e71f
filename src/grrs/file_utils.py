"""Filesystem helpers: root validation, directory listing and line reading"""

import logging
import os
from typing import AnyStr

from grrs.errors import RootNotFoundError, RootNotReadableError


logger = logging.getLogger(__name__)


def validate_root(path: str) -> bool:
    """
    Check that a search root can be used before any job is dispatched.

    Args:
        path: File or directory path supplied by the user

    Returns:
        True if the root is a directory, False if it is a file

    Raises:
        RootNotFoundError: path does not exist
        RootNotReadableError: path is neither a file nor a directory, or the file cannot be opened
    """
    if not os.path.exists(path):
        raise RootNotFoundError(f'Path not found: {path}')

    if os.path.isdir(path):
        return True

    if not os.path.isfile(path):
        raise RootNotReadableError(f'Path is not a file or directory: {path}')

    try:
        with open(path, 'rb'):
            pass
    except OSError as e:
        raise RootNotReadableError(f'Cannot open {path}: {e.strerror or e}') from e

    return False


def list_directory(dirpath: str) -> tuple[list[str], list[str]]:
    """
    List a directory's regular files and subdirectories.

    Symlinks to directories are not returned as subdirectories, so traversal cannot loop.
    Entries that are neither files nor directories (sockets, fifos, broken links) are ignored.

    Returns:
        Tuple of (file_paths, subdirectory_paths)

    Raises:
        OSError: the directory cannot be listed
    """
    files = []
    subdirs = []

    with os.scandir(dirpath) as entries:
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                elif entry.is_file():
                    files.append(entry.path)
                else:
                    logger.debug(f'[SCAN] Skipping non-file: {entry.path}')
            except OSError as e:
                logger.debug(f'[SCAN] Cannot stat {entry.path}: {e}')

    return files, subdirs


def read_file_lines(filepath: str) -> list[bytes]:
    """
    Read a whole file and split it into raw lines.

    Lines are returned undecoded so that a single bad line can be skipped
    instead of failing the file.

    Raises:
        OSError: the file cannot be opened or read
    """
    with open(filepath, 'rb') as f:
        return split_text_lines(f.read())


def split_text_lines(data: AnyStr) -> list[AnyStr]:
    """
    Split text or raw bytes into lines.

    Only '\\n' ends a line and one trailing '\\r' is dropped from each line, so
    files, literal strings and stdin number their lines the same way. Other
    separators such as form feeds stay part of the line.
    """
    newline, carriage_return = (b'\n', b'\r') if isinstance(data, bytes) else ('\n', '\r')

    lines = data.split(newline)
    if lines[-1] == data[:0]:
        lines.pop()

    return [line[:-1] if line.endswith(carriage_return) else line for line in lines]
