import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError as PayloadError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ladder.config import Settings
from ladder.database import get_db
from ladder.deps import get_settings, read_body
from ladder.errors import Forbidden, InvalidCredentials, MissingField, StoreError, Unauthenticated
from ladder.models import User
from ladder.schemas import LoggedInResponse, LoginResponse, Principal, UserSummary

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 by get_current_user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)


# ✅ Password hashing
# bcrypt only looks at the first 72 bytes and current releases refuse longer input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 10) -> str:
    if password_too_long(password):
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is not a valid bcrypt hash")
        return False


# ✅ Token functions
def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.token_expire_days))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: Optional[str], settings: Settings) -> Principal:
    if not token:
        raise Unauthenticated()

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise Forbidden()

    try:
        return Principal(id=payload["id"], username=payload["username"])
    except (KeyError, PayloadError):
        logger.info("Rejected access token: payload has no principal")
        raise Forbidden()


async def authenticate(db: AsyncSession, settings: Settings, username, password):
    """Check credentials against the users table and issue a token.

    Returns ``(token, user)``. Unknown usernames and wrong passwords fail the
    same way so callers cannot tell them apart.
    """
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise MissingField("Username and password required")

    try:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalars().first()
    except SQLAlchemyError as e:
        logger.error("Login lookup failed: %s", e, exc_info=True)
        raise StoreError(error=str(e))

    # bcrypt is CPU-bound, keep it off the event loop
    if user is None or not await run_in_threadpool(verify_password, password, user.password_hash):
        logger.warning("Failed login attempt for username %r", username)
        raise InvalidCredentials()

    token = create_access_token({"id": user.id, "username": user.username}, settings)
    logger.info("User %s logged in", user.username)
    return token, user


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> Principal:
    return decode_access_token(token, settings)


# ✅ Endpoints
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(request: Request, db: AsyncSession = Depends(get_db), settings: Settings = Depends(get_settings)):
    credentials = await read_body(request)
    token, user = await authenticate(db, settings, credentials.get("username"), credentials.get("password"))
    return LoginResponse(
        message="Login successful",
        token=token,
        user=UserSummary.model_validate(user),
    )


@router.get("/logged-in", response_model=LoggedInResponse)
async def logged_in(user: Principal = Depends(get_current_user)):
    return LoggedInResponse(loggedIn=True)
