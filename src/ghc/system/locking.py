# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/system/locking.py

"""
Scoped acquisition of the config document.

Every mutation of the config document happens inside ConfigGuard.exclusive(),
every read inside ConfigGuard.shared(). Both are context managers, so the
guard is released on all exit paths. While held exclusively, a lock file next
to the document records the holder, so a second ghc process waits for it.

A guard is poisoned when its previous holder terminated abnormally: either an
unexpected exception escaped an exclusive section in this process, or a lock
file was left behind by a process that no longer exists. Poisoning is fatal;
every later acquisition raises ConfigLockPoisoned.

Usage:
    guard = guard_for(Path("~/.config/gh/config.yml.lock"))
    with guard.exclusive("set"):
        # mutate the document
        pass
"""

import os
import socket
import threading
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterator, Optional

import loguru
import orjson

from ghc.system.exceptions import ConfigLockPoisoned, GhcError

logger = loguru.logger


class LockInfo:
    """Information about the holder of a config lock file."""

    def __init__(self, operation: str, timestamp: str, pid: int, hostname: str, lock_id: str):
        self.operation = operation
        self.timestamp = timestamp
        self.pid = pid
        self.hostname = hostname
        self.lock_id = lock_id

    def to_dict(self) -> dict[str, str | int]:
        return {
            "operation": self.operation,
            "timestamp": self.timestamp,
            "pid": self.pid,
            "hostname": self.hostname,
            "lock_id": self.lock_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str | int]) -> "LockInfo":
        return cls(
            operation=str(data["operation"]),
            timestamp=str(data["timestamp"]),
            pid=int(data["pid"]),
            hostname=str(data["hostname"]),
            lock_id=str(data["lock_id"]),
        )


class LockError(GhcError):
    """Base exception for locking errors."""


class LockConflictError(LockError):
    """Raised when the lock file is held by another live process."""


def _process_alive(pid: int) -> bool:
    """Check whether a process id on this host still exists."""
    if os.name == "nt":
        # signal 0 is CTRL_C_EVENT on Windows; assume the holder is alive
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class ConfigGuard:
    """
    Process-wide readers/writer guard around one config document.

    Exclusive sections are reentrant for the owning thread. Shared sections
    may run concurrently with each other, never with an exclusive one.
    """

    DEFAULT_TIMEOUT_SECONDS = 10.0

    def __init__(self, lock_path: Optional[Path] = None,
                 timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        """
        Initialize the guard.

        Args:
            lock_path: Lock file marking the exclusive holder; None for in-memory stores
            timeout_seconds: How long to wait for a lock file held by another process
        """
        self.lock_path = lock_path
        self.timeout_seconds = timeout_seconds
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: Optional[int] = None
        self._depth = 0
        self._lock_id: Optional[str] = None
        self._poisoned: Optional[str] = None

    @property
    def poisoned(self) -> bool:
        return self._poisoned is not None

    @contextmanager
    def shared(self) -> Iterator["ConfigGuard"]:
        """Hold the guard for reading."""
        me = threading.get_ident()
        with self._cond:
            while self._writer is not None and self._writer != me:
                self._cond.wait()
            self._check_poisoned()
            self._readers += 1
        try:
            yield self
        finally:
            with self._cond:
                self._readers -= 1
                self._cond.notify_all()

    @contextmanager
    def exclusive(self, operation: str = "write") -> Iterator["ConfigGuard"]:
        """Hold the guard for writing.

        Raises:
            ConfigLockPoisoned: If a previous holder terminated abnormally
            LockConflictError: If another live process holds the lock file
        """
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._depth += 1
                outermost = False
            else:
                while self._writer is not None or self._readers > 0:
                    self._cond.wait()
                self._check_poisoned()
                self._writer = me
                self._depth = 1
                outermost = True

        try:
            if outermost:
                self._acquire_file(operation)
        except BaseException:
            self._leave(release_file=False)
            raise

        try:
            yield self
        except GhcError:
            raise
        except Exception as e:
            self._poison(f"{operation} failed while holding the config lock: {e}")
            raise
        finally:
            self._leave(release_file=outermost)

    def _leave(self, release_file: bool) -> None:
        with self._cond:
            self._depth -= 1
            if self._depth > 0:
                return
            if release_file and not self.poisoned:
                self._release_file()
            self._writer = None
            self._cond.notify_all()

    def _check_poisoned(self) -> None:
        if self._poisoned is not None:
            raise ConfigLockPoisoned(self._poisoned, lock_path=self._lock_path_str())

    def _poison(self, reason: str) -> None:
        logger.error(f"Config lock poisoned: {reason}")
        with self._cond:
            self._poisoned = reason

    def _lock_path_str(self) -> Optional[str]:
        return str(self.lock_path) if self.lock_path is not None else None

    def _acquire_file(self, operation: str) -> None:
        """Create the lock file atomically, waiting for a live holder."""
        if self.lock_path is None:
            return

        self._lock_id = str(uuid.uuid4())
        info = LockInfo(
            operation=operation,
            timestamp=datetime.now(UTC).isoformat(),
            pid=os.getpid(),
            hostname=socket.gethostname(),
            lock_id=self._lock_id,
        )
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        pending = self.lock_path.with_name(f"{self.lock_path.name}.pending-{self._lock_id}")
        pending.write_bytes(orjson.dumps(info.to_dict()))

        deadline = time.monotonic() + self.timeout_seconds
        try:
            while True:
                try:
                    # link() fails if the target exists, and the content is already complete
                    os.link(pending, self.lock_path)
                    logger.debug(f"Acquired config lock {self._lock_id} for {operation}")
                    return
                except FileExistsError:
                    pass

                holder = self._read_holder()
                if holder is None:
                    self._poison(
                        f"config lock file {self.lock_path} is unreadable; a previous ghc "
                        f"process may have crashed while writing the config. Check the "
                        f"config file, then remove the lock file"
                    )
                    self._check_poisoned()
                if self._holder_died(holder):
                    self._poison(
                        f"ghc process {holder.pid} terminated while holding the config lock "
                        f"for {holder.operation} (since {holder.timestamp}). Check the "
                        f"config file, then remove {self.lock_path}"
                    )
                    self._check_poisoned()
                if time.monotonic() >= deadline:
                    raise LockConflictError(
                        f"config locked by process {holder.pid} on {holder.hostname} "
                        f"for {holder.operation} since {holder.timestamp}"
                    )
                time.sleep(min(0.1, max(0.01, self.timeout_seconds / 10)))
        finally:
            pending.unlink(missing_ok=True)

    def _read_holder(self) -> Optional[LockInfo]:
        try:
            return LockInfo.from_dict(orjson.loads(self.lock_path.read_bytes()))
        except FileNotFoundError:
            # released between link() and read; report a live holder so we retry
            return LockInfo("unknown", "", os.getpid(), "", "")
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Error reading lock file {self.lock_path}: {e}")
            return None

    def _holder_died(self, holder: LockInfo) -> bool:
        if not holder.lock_id:
            return False
        if holder.hostname != socket.gethostname():
            return False
        if holder.pid == os.getpid():
            # this process owns the in-process guard, so the file is a leftover
            return True
        return not _process_alive(holder.pid)

    def _release_file(self) -> None:
        if self.lock_path is None or self._lock_id is None:
            return
        if not self.lock_path.exists():
            logger.debug("Lock file not found during release - already released")
            self._lock_id = None
            return
        holder = self._read_holder()
        if holder is not None and holder.lock_id == self._lock_id:
            self.lock_path.unlink(missing_ok=True)
            logger.debug(f"Released config lock {self._lock_id}")
        else:
            logger.warning(f"Config lock {self.lock_path} no longer ours; leaving it in place")
        self._lock_id = None


_GUARDS: dict[Path, ConfigGuard] = {}
_GUARDS_LOCK = threading.Lock()


def guard_for(lock_path: Optional[Path]) -> ConfigGuard:
    """
    Return the process-wide guard for a lock file.

    Stores that share a backing document share one guard. In-memory stores
    (lock_path None) each get a private guard.
    """
    if lock_path is None:
        return ConfigGuard()
    key = lock_path.expanduser().resolve()
    with _GUARDS_LOCK:
        guard = _GUARDS.get(key)
        if guard is None:
            guard = ConfigGuard(key)
            _GUARDS[key] = guard
        return guard
