"""
Swap a freshly installed toolchain in place of an existing one.

rustup keeps each toolchain under ``<rustup-home>/toolchains/<name>`` and its
update hash under ``<rustup-home>/update-hashes/<name>``. Replacing moves the
new toolchain's entries to the old name, after either removing the old ones
or keeping them as ``<name>-old``.

Each step fails with its own exception (and exit code). Nothing is rolled
back: after a failure the rustup home may be half swapped.
"""

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

from ..core.exceptions import (
    MoveNewHashesError,
    MoveNewToolchainError,
    MovePreviousHashesError,
    MovePreviousToolchainError,
    RemovePreviousHashesError,
    RemovePreviousToolchainError,
    ReplaceLockTimeout,
)

logger = logging.getLogger(__name__)

LOCK_FILE = "nightlykit.lock"


def default_rustup_home() -> Path:
    """Return $RUSTUP_HOME, falling back to ~/.rustup."""
    env_home = os.environ.get("RUSTUP_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".rustup"


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class ToolchainReplacer:
    """Renames rustup toolchain and hash entries."""

    def __init__(self, rustup_home: Union[str, Path], lock_timeout: int = 30):
        """
        Initialize replacer.

        Args:
            rustup_home: rustup home directory (usually ~/.rustup)
            lock_timeout: Seconds to wait for a concurrent replace to finish
        """
        self.rustup_home = Path(rustup_home)
        self.lock_timeout = lock_timeout

    @property
    def toolchains_dir(self) -> Path:
        return self.rustup_home / "toolchains"

    @property
    def hashes_dir(self) -> Path:
        return self.rustup_home / "update-hashes"

    @contextmanager
    def _lock(self):
        lock_path = self.rustup_home / LOCK_FILE
        lock = FileLock(lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                logger.debug(f"Acquired replace lock: {lock_path}")
                yield
                logger.debug(f"Released replace lock: {lock_path}")
        except LockTimeout as e:
            raise ReplaceLockTimeout(
                f"Could not acquire replace lock after {self.lock_timeout}s. "
                "Another nightlykit process may be running."
            ) from e

    def replace(self, old: str, new: str, keep_previous: bool = False) -> None:
        """
        Replace toolchain ``old`` by toolchain ``new``.

        Args:
            old: Name of the toolchain being replaced
            new: Name of the newly installed toolchain
            keep_previous: Keep the previous entries as '<old>-old'

        Raises:
            ReplaceError: Subclass identifying the step that failed
            ReplaceLockTimeout: If another replace is in progress
        """
        if old == new:
            logger.debug(f"Toolchain {old} replaces itself, nothing to move")
            return

        with self._lock():
            self._swap_toolchain(old, new, keep_previous)
            self._swap_hashes(old, new, keep_previous)

    def _swap_toolchain(self, old: str, new: str, keep_previous: bool) -> None:
        directory = self.toolchains_dir

        if keep_previous:
            try:
                os.rename(directory / old, directory / f"{old}-old")
            except OSError as e:
                raise MovePreviousToolchainError(
                    f"Could not move previous toolchain {old} to new location."
                ) from e
        else:
            try:
                _remove(directory / old)
            except OSError as e:
                raise RemovePreviousToolchainError(
                    f"Could not remove previous toolchain {old}."
                ) from e

        try:
            os.rename(directory / new, directory / old)
        except OSError as e:
            raise MoveNewToolchainError(
                f"Could not move toolchain {new} to new location {old}."
            ) from e

        logger.debug(f"Moved toolchain {new} to {directory / old}")

    def _swap_hashes(self, old: str, new: str, keep_previous: bool) -> None:
        directory = self.hashes_dir

        if keep_previous:
            try:
                os.rename(directory / old, directory / f"{old}-old")
            except OSError as e:
                raise MovePreviousHashesError(
                    f"Could not move previous hashes for toolchain {old} to new location."
                ) from e
        else:
            try:
                _remove(directory / old)
            except OSError as e:
                raise RemovePreviousHashesError(
                    f"Could not remove previous hashes for toolchain {old}."
                ) from e

        try:
            os.rename(directory / new, directory / old)
        except OSError as e:
            raise MoveNewHashesError(
                f"Could not move hashes of toolchain {new} to new location {old}."
            ) from e

        logger.debug(f"Moved hashes of {new} to {directory / old}")
