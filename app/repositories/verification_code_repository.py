from datetime import datetime
from typing import Optional
from sqlalchemy import delete
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from app.models.verification_code import VerificationCode

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class VerificationCodeRepository:

    def __init__(self, db: Session, purpose: str):
        self.db = db
        self.purpose = purpose

    def get(self, identifier: str) -> Optional[VerificationCode]:
        return self.db.query(VerificationCode).filter(
            VerificationCode.purpose == self.purpose,
            VerificationCode.identifier == identifier
        ).first()

    def replace(self, identifier: str, code: str, expires_at: datetime) -> None:
        """Insert or overwrite the entry in a single statement, so concurrent issues never collide on the key."""
        values = {
            "purpose": self.purpose,
            "identifier": identifier,
            "code": code,
            "expires_at": expires_at,
        }
        dialect = self.db.get_bind().dialect.name

        if dialect in UPSERT_DIALECTS:
            stmt = UPSERT_DIALECTS[dialect](VerificationCode).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[VerificationCode.purpose, VerificationCode.identifier],
                set_={"code": code, "expires_at": expires_at, "created_at": func.now()}
            )
        elif dialect in ("mysql", "mariadb"):
            stmt = mysql.insert(VerificationCode).values(**values)
            stmt = stmt.on_duplicate_key_update(code=code, expires_at=expires_at, created_at=func.now())
        else:
            raise NotImplementedError(f"No upsert support for dialect '{dialect}'")

        self.db.execute(stmt)

    def delete_if_valid(self, identifier: str, code: str, now: datetime) -> bool:
        """Conditional delete: succeeds only if the exact live entry is still there."""
        result = self.db.execute(
            delete(VerificationCode).where(
                VerificationCode.purpose == self.purpose,
                VerificationCode.identifier == identifier,
                VerificationCode.code == code,
                VerificationCode.expires_at >= now
            ).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def delete_expired_entry(self, identifier: str, code: str, now: datetime) -> int:
        """Drop an entry only while it is still the expired one that was read."""
        result = self.db.execute(
            delete(VerificationCode).where(
                VerificationCode.purpose == self.purpose,
                VerificationCode.identifier == identifier,
                VerificationCode.code == code,
                VerificationCode.expires_at < now
            ).execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_expired(self, now: datetime) -> int:
        result = self.db.execute(
            delete(VerificationCode).where(
                VerificationCode.purpose == self.purpose,
                VerificationCode.expires_at < now
            ).execution_options(synchronize_session=False)
        )
        return result.rowcount
