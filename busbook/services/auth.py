import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select as sa_select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.config import settings
from busbook.exceptions import DuplicateEmail, InvalidCredentials, Unauthorized
from busbook.models.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, decoded from a bearer token."""

    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str):
    stmt = sa_select(User).where(User.email == normalize_email(email))
    res = await db.execute(stmt)
    return res.scalars().first()


async def register_user(db: AsyncSession, username: str, email: str, password: str, role: str = "user") -> User:
    """Create a user, storing only the bcrypt hash of the password.

    Raises DuplicateEmail when the address is taken, including when a
    concurrent registration wins the race to the unique constraint.
    """
    email = normalize_email(email)
    if await get_user_by_email(db, email):
        raise DuplicateEmail()
    user = User(username=username, email=email, hashed_password=hash_password(password), role=role)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmail()
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


async def verify_credentials(db: AsyncSession, email: str, password: str) -> User:
    """Return the user owning these credentials or raise InvalidCredentials.

    Unknown emails still pay for a hash verification so the two failure
    modes cannot be told apart by timing or by message.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        pwd_context.dummy_verify()
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def issue_token(user: User) -> str:
    now = _now()
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def authenticate(token: str) -> Identity:
    """Validate signature and expiry; no revocation list is consulted."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid authentication credentials")
    sub = payload.get("sub")
    if sub is None or "exp" not in payload:
        raise Unauthorized("Invalid authentication credentials")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise Unauthorized("Invalid authentication credentials")
    return Identity(user_id=user_id, role=payload.get("role") or "user")
