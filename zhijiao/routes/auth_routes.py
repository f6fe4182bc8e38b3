import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zhijiao.auth import jwt_handler
from zhijiao.auth.dependencies import get_current_identity
from zhijiao.core import config
from zhijiao.database import get_db
from zhijiao.models.user import User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'
USER_ROLE = 'user'


class AuthRequest(BaseModel):
    action: str | None = None
    email: str | None = None
    password: str | None = None


def role_for_email(email: str) -> str:
    return ADMIN_ROLE if email == config.ADMIN_EMAIL else USER_ROLE


def is_bootstrap_admin(email: str, password: str) -> bool:
    if not config.ADMIN_BOOTSTRAP_ENABLED:
        return False
    return email == config.ADMIN_EMAIL and password == config.ADMIN_BOOTSTRAP_PASSWORD


def register(email: str, password: str, db: Session) -> dict:
    role = role_for_email(email)
    db.add(User(id=str(uuid.uuid4()), email=email, password=password, role=role))
    db.commit()
    logger.info('Registered %s with role %s', email, role)
    return {'success': True, 'role': role}


def login(email: str, password: str, db: Session) -> dict:
    """Check credentials and return the role.

    The bearer token in the response is informational: only `/me` reads it,
    and no resource endpoint requires it.
    """
    user = (
        db.query(User)
        .filter(User.email == email, User.password == password)
        .first()
    )
    if user is not None:
        role = user.role or USER_ROLE
    elif is_bootstrap_admin(email, password):
        logger.warning('Bootstrap admin login used for %s', email)
        role = ADMIN_ROLE
    else:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid email or password')

    token = jwt_handler.create_access_token(subject=email, role=role)
    return {'success': True, 'role': role, 'access_token': token, 'token_type': 'bearer'}


@router.post('')
def authenticate(payload: AuthRequest, db: Session = Depends(get_db)):
    email = payload.email or ''
    password = payload.password or ''

    if payload.action not in {'register', 'login'}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Invalid action')

    if not email.strip() or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email and password are required')

    try:
        if payload.action == 'register':
            return register(email, password, db)
        return login(email, password, db)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Auth %s failed for %s', payload.action, email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={'error': 'Auth failed', 'details': str(exc)},
        ) from exc


@router.get('/me')
def me(identity: dict = Depends(get_current_identity)):
    """Echo the identity carried by a login token."""
    return identity
