import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.db.session import get_session
from busbook.exceptions import InvalidCredentials
from busbook.metrics import LOGIN_ATTEMPTS
from busbook.schemas.auth import LoginIn, RegisterIn, TokenOut, UserOut
from busbook.services import auth as auth_service
from busbook.services.login_throttle import LoginThrottle, get_login_throttle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=201, response_model=UserOut)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_session)):
    user = await auth_service.register_user(db, payload.username, payload.email, payload.password)
    return user


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_session), throttle: LoginThrottle = Depends(get_login_throttle)):
    identifier = auth_service.normalize_email(payload.email)
    await throttle.check(identifier)
    try:
        user = await auth_service.verify_credentials(db, identifier, payload.password)
    except InvalidCredentials:
        LOGIN_ATTEMPTS.labels(result="failed").inc()
        logger.warning("Failed login attempt")
        await throttle.record_failure(identifier)
        raise

    # successful login: clear attempts
    await throttle.reset(identifier)
    LOGIN_ATTEMPTS.labels(result="success").inc()
    return {"token": auth_service.issue_token(user), "user": UserOut.model_validate(user)}
