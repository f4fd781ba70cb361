from typing import List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from busbook.exceptions import Forbidden, Unauthorized
from busbook.services import auth as auth_service
from busbook.services.auth import Identity


# auto_error off so a missing header surfaces as our 401, not FastAPI's default
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Identity:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized()
    return auth_service.authenticate(credentials.credentials)


def role_required(allowed: List[str]):
    async def _dep(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return _dep
