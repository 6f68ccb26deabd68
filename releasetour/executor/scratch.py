"""
Scratch files for submitted source.

Each execution writes its source into its own uniquely named file in a shared
scratch directory. The file only exists inside the ``scratch_file`` context:
it is removed on every exit path, including errors and timeouts.
"""
import itertools
import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

from releasetour.config.defaults import EXECUTOR_DEFAULTS
from releasetour.exceptions import ScratchDirectoryError, ScratchIOError

logger = logging.getLogger(__name__)

_sequence = itertools.count()


def scratch_filename(
    prefix: str = EXECUTOR_DEFAULTS.file_prefix,
    suffix: str = EXECUTOR_DEFAULTS.file_suffix,
) -> str:
    """``gocode_<seconds>_<nanoseconds>_<pid>_<n>.go``; unique within the directory."""
    now = time.time_ns()
    seconds, nanos = divmod(now, 1_000_000_000)
    return f"{prefix}{seconds}_{nanos}_{os.getpid()}_{next(_sequence)}{suffix}"


def ensure_scratch_dir(directory: str) -> str:
    """Create ``directory`` if needed and check it is writable.

    Raises:
        ScratchDirectoryError: If the directory cannot be used at all.
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise ScratchDirectoryError(directory, str(e)) from e
    if not os.access(directory, os.W_OK | os.X_OK):
        raise ScratchDirectoryError(directory, "not writable")
    return os.path.abspath(directory)


@contextmanager
def scratch_file(
    directory: str,
    source: str,
    prefix: str = EXECUTOR_DEFAULTS.file_prefix,
    suffix: str = EXECUTOR_DEFAULTS.file_suffix,
) -> Iterator[str]:
    """Write ``source`` to a new scratch file and yield its path.

    Raises:
        ScratchIOError: If the file cannot be created, written or removed.
            A partially written file is removed before raising.
    """
    path = os.path.join(directory, scratch_filename(prefix, suffix))
    try:
        # "x" refuses to reuse an existing name
        with open(path, "x", encoding="utf-8") as f:
            f.write(source)
    except FileExistsError as e:
        raise ScratchIOError(path, "create", str(e)) from e
    except UnicodeEncodeError as e:
        # source that is not encodable as UTF-8, e.g. a lone surrogate
        _discard(path)
        raise ScratchIOError(path, "write", str(e)) from e
    except (OSError, ValueError) as e:
        _discard(path)
        raise ScratchIOError(path, "create", str(e)) from e

    try:
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove scratch file {path}: {e}")
            raise ScratchIOError(path, "remove", str(e)) from e


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove partial scratch file {path}: {e}")
