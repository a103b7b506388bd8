"""
User storage.

``UserStore`` is the contract the auth service depends on: a full ``load``
and a full ``save`` of the user list, plus ``transaction()`` for
read-modify-write cycles. Two implementations are provided:

- ``JsonUserStore``: a single human-readable JSON array on disk, rewritten
  wholesale via temp file + atomic replace, writers serialised by a lock file.
- ``SqlUserStore``: the same contract on top of a SQLAlchemy engine.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from pydantic import ValidationError as SchemaError

from moviehub.db import Base, make_session_factory
from moviehub.errors import StoreError
from moviehub.models import UserRow
from moviehub.schemas import User

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = 10
LOCK_POLL_INTERVAL = 0.05
LOCK_STALE_SECONDS = 30


def _pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    if os.name == "nt":
        # os.kill would terminate the process; rely on lock age instead
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class UserStore:
    """Base class for user persistence."""

    def __init__(self):
        self._mutex = threading.RLock()

    def load(self) -> List[User]:
        raise NotImplementedError

    def save(self, users: List[User]) -> None:
        raise NotImplementedError

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        with self._mutex:
            yield

    @contextmanager
    def transaction(self) -> Iterator[List[User]]:
        """
        Load all users, hand the list to the caller, save it on clean exit.

        If the block raises, nothing is written.
        """
        with self._write_lock():
            users = self.load()
            yield users
            self.save(users)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.load() if u.id == user_id), None)

    def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.load() if u.email == email), None)


class JsonUserStore(UserStore):
    """Users kept as one JSON array in ``path``."""

    def __init__(
        self,
        path,
        lock_timeout: float = LOCK_TIMEOUT_SECONDS,
        stale_after: float = LOCK_STALE_SECONDS,
    ):
        super().__init__()
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.lock_timeout = lock_timeout
        self.stale_after = stale_after

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._atomic_write([])

    def load(self) -> List[User]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
            data = json.loads(raw or "[]")
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Failed to load users from {self.path}: {e}")

        if not isinstance(data, list):
            raise StoreError(f"Failed to load users from {self.path}: expected a JSON array")

        try:
            return [User.model_validate(item) for item in data]
        except SchemaError as e:
            raise StoreError(f"Failed to load users from {self.path}: {e}")

    def save(self, users: List[User]) -> None:
        self._atomic_write([u.to_record() for u in users])
        logger.debug("Saved %d users to %s", len(users), self.path)

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        with self._mutex:
            with self._file_lock():
                yield

    @contextmanager
    def _file_lock(self) -> Iterator[None]:
        """
        Exclusive lock file next to the store, shared with other processes.

        A lock whose owner pid is gone, or older than ``stale_after``
        seconds, is left over from a crashed writer and gets taken over.
        """
        start = time.monotonic()
        while True:
            try:
                fd = os.open(str(self.lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                if self._lock_is_stale():
                    logger.warning("Removing stale lock %s", self.lock_path)
                    try:
                        self.lock_path.unlink()
                    except FileNotFoundError:
                        pass
                    continue
                if (time.monotonic() - start) >= self.lock_timeout:
                    raise StoreError(
                        f"Could not lock {self.path} within {self.lock_timeout}s"
                    )
                time.sleep(LOCK_POLL_INTERVAL)
                continue
            try:
                os.write(fd, str(os.getpid()).encode())
            finally:
                os.close(fd)
            break

        try:
            yield
        finally:
            try:
                self.lock_path.unlink()
            except FileNotFoundError:
                pass

    def _lock_is_stale(self) -> bool:
        try:
            age = time.time() - self.lock_path.stat().st_mtime
            owner = self.lock_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return False
        if age > self.stale_after:
            return True
        try:
            pid = int(owner)
        except ValueError:
            # owner has not written its pid yet
            return False
        return not _pid_alive(pid)

    def _atomic_write(self, payload: list) -> None:
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8", suffix=".tmp"
        ) as tf:
            json.dump(payload, tf, indent=2, ensure_ascii=False)
            temp_path = Path(tf.name)

        try:
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StoreError(f"Failed to save users to {self.path}: {e}")


class SqlUserStore(UserStore):
    """Users kept in the ``users`` table of a SQLAlchemy database."""

    def __init__(self, engine):
        super().__init__()
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)
        Base.metadata.create_all(bind=engine)

    def load(self) -> List[User]:
        db = self.SessionLocal()
        try:
            rows = db.query(UserRow).all()
            return [
                User(
                    id=r.id,
                    name=r.name,
                    email=r.email,
                    password_hash=r.password_hash,
                    watchlist=list(r.watchlist or []),
                )
                for r in rows
            ]
        finally:
            db.close()

    def save(self, users: List[User]) -> None:
        db = self.SessionLocal()
        try:
            for u in users:
                db.merge(
                    UserRow(
                        id=u.id,
                        name=u.name or "",
                        email=u.email,
                        password_hash=u.password_hash,
                        watchlist=list(u.watchlist),
                    )
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Saved %d users to %s", len(users), self.engine.url)
