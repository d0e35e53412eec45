"""SQLAlchemy User model and the profile-completeness rule."""

from datetime import UTC, date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


# Fields that must all be filled in before a profile counts as complete.
REQUIRED_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "contact_number",
    "birth_date",
    "gender",
    "height",
    "weight",
    "emergency_contact_name",
    "emergency_contact_number",
)

# Every column a client may write through profile creation or update.
PROFILE_FIELDS = REQUIRED_PROFILE_FIELDS + (
    "dietary_preference",
    "calorie_intake_goal",
    "calorie_burn_goal",
)


class User(Base):
    """A Care4U account.

    Created with only an email on the first OTP request; the profile
    columns are filled in later by profile completion.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    contact_number: Mapped[str | None] = mapped_column(String(20))
    birth_date: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[str | None] = mapped_column(String(20))
    height: Mapped[int | None] = mapped_column(Integer, doc="Height in centimetres")
    weight: Mapped[int | None] = mapped_column(Integer, doc="Weight in kilograms")
    bmi: Mapped[float | None] = mapped_column(Float)
    emergency_contact_name: Mapped[str | None] = mapped_column(String(100))
    emergency_contact_number: Mapped[str | None] = mapped_column(String(20))
    dietary_preference: Mapped[str | None] = mapped_column(String(20))
    calorie_intake_goal: Mapped[int | None] = mapped_column(Integer)
    calorie_burn_goal: Mapped[int | None] = mapped_column(Integer)

    is_profile_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, doc="Display cache only; see is_profile_complete()"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


def is_profile_complete(user: User | None) -> bool:
    """Return ``True`` if every required profile field is filled in.

    This is the only place completeness is decided; the cached
    ``User.is_profile_complete`` column is never consulted.
    """
    if user is None:
        return False
    for field in REQUIRED_PROFILE_FIELDS:
        value = getattr(user, field)
        if value is None or value == "" or value == 0:
            return False
    return True


def has_profile_record(user: User | None) -> bool:
    """Return ``True`` once any profile field has been written for *user*."""
    if user is None:
        return False
    return any(getattr(user, field) not in (None, "") for field in PROFILE_FIELDS)
