import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, field_validator

from appointy.auth.passwords import hash_password
from appointy.core import config
from appointy.database import (
    DatastoreClient,
    DatastoreConnectionError,
    DatastoreError,
    DatastoreTimeoutError,
    DocumentNotFound,
    DuplicateDocumentError,
)
from appointy.models.user import User

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MAX_NAME_LENGTH = 200


class CreateUserRequest(BaseModel):
    name: str
    email: str
    password: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        if len(normalized) > MAX_NAME_LENGTH:
            raise ValueError(f'Name must be {MAX_NAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        if not EMAIL_PATTERN.match(normalized):
            raise ValueError('Email address is not valid.')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < config.PASSWORD_MIN_LENGTH:
            raise ValueError(f'Password must be at least {config.PASSWORD_MIN_LENGTH} characters.')
        return value


class UserResponse(BaseModel):
    id: str
    name: str
    email: str


def get_datastore(request: Request) -> DatastoreClient:
    datastore = getattr(request.app.state, 'datastore', None)
    if datastore is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Datastore unavailable. Verify MONGODB_URI and that MongoDB is running.',
        )
    return datastore


def to_http_exception(exc: DatastoreError) -> HTTPException:
    if isinstance(exc, DatastoreTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail='Datastore request timed out.')
    if isinstance(exc, DatastoreConnectionError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail='Datastore unavailable.')
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail='Internal server error.')


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: CreateUserRequest, datastore: DatastoreClient = Depends(get_datastore)):
    user = User(name=data.name, email=data.email, hashed_password=hash_password(data.password))

    try:
        inserted_id = datastore.insert_one(user.to_document(), timeout=config.REQUEST_TIMEOUT_SECONDS)
    except DuplicateDocumentError as exc:
        logger.info('Rejected duplicate user email: %s', exc)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='A user with this email already exists.',
        ) from exc
    except DatastoreError as exc:
        logger.exception('Failed to create user')
        raise to_http_exception(exc) from exc

    user.id = str(inserted_id)
    logger.info('Created user id=%s', user.id)
    return user.public_fields()


@router.get('/{user_id}', response_model=UserResponse)
def get_user(user_id: str, datastore: DatastoreClient = Depends(get_datastore)):
    try:
        document = datastore.find_by_id(user_id, timeout=config.REQUEST_TIMEOUT_SECONDS)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found.') from exc
    except DatastoreError as exc:
        logger.exception('Failed to read user id=%s', user_id)
        raise to_http_exception(exc) from exc

    return User.from_document(document).public_fields()
