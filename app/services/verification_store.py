"""
One-time verification code stores.

A store keeps at most one pending code per identifier. Codes are issued
with a caller supplied time-to-live and redeemed exactly once; expiry is
checked lazily on redemption, and ``purge_expired`` lets a background
reaper drop abandoned entries.

Two backends share the same contract:

* ``InMemoryVerificationCodeStore`` - a dict behind a lock. Only valid for
  a single process.
* ``DatabaseVerificationCodeStore`` - a SQLAlchemy table with a conditional
  delete on redemption, so several instances can share it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional
import logging
import secrets
import threading

from sqlalchemy.orm import Session, sessionmaker

from app.core.exceptions import (
    CodeExpiredError,
    CodeMismatchError,
    CodeNotFoundError,
    InvalidArgumentError,
)
from app.repositories.verification_code_repository import VerificationCodeRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class VerificationEntry:
    identifier: str
    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def normalize_identifier(identifier: str) -> str:
    if identifier is None or not identifier.strip():
        raise InvalidArgumentError("Identifier must not be empty")
    cleaned = identifier.strip()
    if "@" in cleaned:
        return cleaned.lower()
    return cleaned


def generate_verification_code(length: int = 6) -> str:
    """Uniform random numeric code, zero-padded to ``length`` digits."""
    if length < 1:
        raise InvalidArgumentError("Code length must be positive")
    return str(secrets.randbelow(10 ** length)).zfill(length)


def _validate_ttl(ttl: timedelta) -> None:
    if ttl <= timedelta(0):
        raise InvalidArgumentError("TTL must be positive")


def codes_match(stored: str, supplied: str) -> bool:
    # compare_digest only accepts ASCII str, so compare the encoded bytes
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class VerificationCodeStore(ABC):
    """Interface shared by the store backends."""

    def __init__(self, purpose: str, code_length: int = 6, clock: Optional[Clock] = None):
        self.purpose = purpose
        self.code_length = code_length
        self._clock = clock or utc_now

    @abstractmethod
    def issue(self, identifier: str, ttl: timedelta) -> str:
        ...

    @abstractmethod
    def redeem(self, identifier: str, supplied_code: str) -> VerificationEntry:
        ...

    @abstractmethod
    def purge_expired(self) -> int:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class InMemoryVerificationCodeStore(VerificationCodeStore):

    def __init__(self, purpose: str, code_length: int = 6, clock: Optional[Clock] = None):
        super().__init__(purpose, code_length, clock)
        self._entries: Dict[str, VerificationEntry] = {}
        self._lock = threading.Lock()

    def issue(self, identifier: str, ttl: timedelta) -> str:
        key = normalize_identifier(identifier)
        _validate_ttl(ttl)
        code = generate_verification_code(self.code_length)

        with self._lock:
            self._entries[key] = VerificationEntry(
                identifier=key,
                code=code,
                expires_at=self._clock() + ttl
            )

        logger.info(f"Issued {self.purpose} code for {key}")
        return code

    def redeem(self, identifier: str, supplied_code: str) -> VerificationEntry:
        key = normalize_identifier(identifier)
        supplied = (supplied_code or "").strip()

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                raise CodeNotFoundError(f"No pending code for {key}")

            if entry.is_expired(self._clock()):
                del self._entries[key]
                raise CodeExpiredError(f"Code for {key} has expired")

            if not codes_match(entry.code, supplied):
                raise CodeMismatchError(f"Code mismatch for {key}")

            del self._entries[key]

        logger.info(f"Redeemed {self.purpose} code for {key}")
        return entry

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def close(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class DatabaseVerificationCodeStore(VerificationCodeStore):

    def __init__(
        self,
        session_factory: sessionmaker,
        purpose: str,
        code_length: int = 6,
        clock: Optional[Clock] = None
    ):
        super().__init__(purpose, code_length, clock)
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    def issue(self, identifier: str, ttl: timedelta) -> str:
        key = normalize_identifier(identifier)
        _validate_ttl(ttl)
        code = generate_verification_code(self.code_length)

        db = self._session()
        try:
            VerificationCodeRepository(db, self.purpose).replace(
                identifier=key,
                code=code,
                expires_at=self._clock() + ttl
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Issued {self.purpose} code for {key}")
        return code

    def redeem(self, identifier: str, supplied_code: str) -> VerificationEntry:
        key = normalize_identifier(identifier)
        supplied = (supplied_code or "").strip()
        now = self._clock()

        db = self._session()
        try:
            repo = VerificationCodeRepository(db, self.purpose)
            row = repo.get(key)
            if row is None:
                raise CodeNotFoundError(f"No pending code for {key}")

            entry = VerificationEntry(
                identifier=row.identifier,
                code=row.code,
                expires_at=_as_utc(row.expires_at)
            )

            if entry.is_expired(now):
                # Only drop the row that was read; a fresh reissue must survive.
                repo.delete_expired_entry(key, entry.code, now)
                db.commit()
                raise CodeExpiredError(f"Code for {key} has expired")

            if not codes_match(entry.code, supplied):
                raise CodeMismatchError(f"Code mismatch for {key}")

            # Another instance may have consumed or replaced the entry since the read.
            if not repo.delete_if_valid(key, supplied, now):
                db.rollback()
                raise CodeNotFoundError(f"No pending code for {key}")
            db.commit()
        except (CodeNotFoundError, CodeExpiredError, CodeMismatchError):
            raise
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Redeemed {self.purpose} code for {key}")
        return entry

    def purge_expired(self) -> int:
        db = self._session()
        try:
            count = VerificationCodeRepository(db, self.purpose).delete_expired(self._clock())
            db.commit()
            return count
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def close(self) -> None:
        # Rows are shared with other instances; nothing to release locally.
        logger.info(f"Closed {self.purpose} verification store")
