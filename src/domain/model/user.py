from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum

# Fixed-width RFC 3339 layout: lexical order matches chronological order.
TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S.%fZ'


class Country(str, Enum):
    """Countries a user can belong to. UNKNOWN is never a stored value."""
    UNKNOWN = 'UNKNOWN'
    EN = 'EN'
    IT = 'IT'
    FR = 'FR'
    DE = 'DE'
    ES = 'ES'

    @property
    def is_valid(self) -> bool:
        return self is not Country.UNKNOWN


def is_valid_country(country) -> bool:
    """True only for concrete Country members (not the UNKNOWN sentinel)."""
    return isinstance(country, Country) and country.is_valid


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc))


# ── Entity ───────────────────────────────────────────────


@dataclass
class User:
    """Domain model representing a stored user."""
    id: str
    first_name: str
    last_name: str
    nickname: str
    email: str
    password_hash: str
    country: Country
    created_at: str
    updated_at: str

    def to_profile(self) -> 'UserProfile':
        """Caller-facing view of the user, without the password hash."""
        return UserProfile(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            nickname=self.nickname,
            email=self.email,
            country=self.country,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True)
class UserProfile:
    """User as returned to callers."""
    id: str
    first_name: str
    last_name: str
    nickname: str
    email: str
    country: Country
    created_at: str
    updated_at: str


# ── Requests ─────────────────────────────────────────────


@dataclass(frozen=True)
class CreateUserRequest:
    first_name: str
    last_name: str
    nickname: str
    email: str
    password: str
    country: Country


@dataclass(frozen=True)
class UpdateUserRequest:
    """Partial update. ``None`` leaves a field untouched; ``''`` is applied."""
    id: str
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    email: str | None = None
    password: str | None = None
    country: Country | None = None


@dataclass(frozen=True)
class GetUsersRequest:
    page: int
    page_size: int
    filter_country: Country | None = None


@dataclass(frozen=True)
class DeleteUserRequest:
    id: str


# ── Repository patch and results ─────────────────────────


@dataclass(frozen=True)
class UserChanges:
    """Fields to overwrite on a stored user. The password is already hashed."""
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    email: str | None = None
    password_hash: str | None = None
    country: Country | None = None

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not None

    def set_fields(self) -> dict:
        """Return only the fields carrying a replacement value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if self.is_set(f.name)
        }


@dataclass(frozen=True)
class UserPage:
    results: list[UserProfile]
    page: int
    page_size: int
    total_count: int


@dataclass(frozen=True)
class ServiceStatus:
    status: str
    message: str
