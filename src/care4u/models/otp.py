"""SQLAlchemy OTP challenge model."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from care4u.models.user import Base


class OTPChallenge(Base):
    """An outstanding one-time code for an email address.

    At most one row per email is live: issuing a new code deletes the
    previous one first.
    """

    __tablename__ = "otp_verification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    otp: Mapped[str] = mapped_column(
        String(6), nullable=False, doc="Stored as text to keep leading zeros"
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    __table_args__ = (
        Index("idx_otp_email", "email"),
        Index("idx_otp_expires", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<OTPChallenge email={self.email!r} expires_at={self.expires_at}>"
