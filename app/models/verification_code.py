from sqlalchemy import Column, String, DateTime, PrimaryKeyConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class VerificationCode(Base):
    __tablename__ = "verification_codes"
    __table_args__ = (
        PrimaryKeyConstraint("purpose", "identifier", name="pk_verification_codes"),
    )

    purpose = Column(String(50), nullable=False, comment="Flow the code belongs to (registration, password_reset)")
    identifier = Column(String(255), nullable=False, comment="Normalized email address")

    code = Column(String(12), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<VerificationCode(purpose={self.purpose}, identifier={self.identifier})>"
