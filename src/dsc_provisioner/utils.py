"""
Utils functions
"""
import logging
import os
import posixpath
from functools import wraps
from pathlib import Path
from typing import Optional, Union


def log_function_call(func):
    """
    A decorator that logs the function call and its arguments.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        logging.debug(f"Calling {func.__name__} with args: {args}, kwargs: {kwargs}")
        try:
            result = func(*args, **kwargs)
            logging.debug(f"{func.__name__} returned: {result}")
            return result
        except Exception as e:
            logging.error(f"Exception in {func.__name__}: {e}")
            raise
    return wrapper


def setup_logging(level: Union[str, int] = "INFO", log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name or number
        log_file: File to write to. Logs go to stderr when omitted.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handlers = None
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def expand_host_path(path: Union[str, os.PathLike], base: Union[str, os.PathLike]) -> str:
    """
    Expand a path relative to a base directory on the host.

    Absolute paths are kept, '~' is expanded and '..' components are folded.

    Args:
        path: Path to expand
        base: Directory relative paths are resolved against

    Returns:
        str: Absolute, normalized path
    """
    base = os.path.expanduser(os.fspath(base))
    path = os.path.expanduser(os.fspath(path))
    return os.path.abspath(os.path.join(base, path))


def expand_guest_path(path: str, base: str) -> str:
    """
    Expand a path relative to a directory on the guest.

    Guest paths always use forward slashes, whatever the host OS is, and are
    never resolved against the host's working directory.
    """
    return posixpath.normpath(posixpath.join(base, path))


def strip_extension(filename: str) -> str:
    """Return the base name of a path without its last extension."""
    return os.path.splitext(os.path.basename(filename))[0]


def dirname(path: str) -> str:
    """Directory component of a path, '.' for a bare file name."""
    return os.path.dirname(path) or "."
