import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zhijiao.database import ensure_resource_schema, get_db
from zhijiao.models.resource import Resource

router = APIRouter(tags=['resources'])

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ('article', 'resource', 'tool')
DEFAULT_TITLE = '未命名文章'
DEFAULT_TYPE = 'article'
DEFAULT_AUTHOR = '管理员'
DEFAULT_LINK = '#'
MAX_LIKES = 2**63 - 1  # signed 64-bit INTEGER column


def parse_tags(value: Any) -> list[str]:
    """Decode the stored tag text; anything that is not a JSON list yields []."""
    if isinstance(value, list):
        return [str(tag) for tag in value]
    if not value:
        return []
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.warning('Ignoring malformed tags value %r', value)
        return []
    if not isinstance(decoded, list):
        return []
    return [str(tag) for tag in decoded]


class ResourcePayload(BaseModel):
    id: str | None = None
    title: str | None = None
    description: str | None = None
    type: str | None = None
    author: str | None = None
    date: str | None = None
    tags: list[str] = []
    link: str | None = None
    likes: int = 0
    content: str | None = None

    @field_validator('type')
    @classmethod
    def validate_type(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if not normalized:
            return None
        if normalized not in RESOURCE_TYPES:
            raise ValueError('Invalid resource type.')
        return normalized

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(tag) for tag in value]

    @field_validator('likes', mode='before')
    @classmethod
    def coerce_likes(cls, value: Any) -> int:
        try:
            likes = value if isinstance(value, int) else int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
        return min(max(likes, 0), MAX_LIKES)


class ResourceResponse(BaseModel):
    id: str
    title: str
    description: str = ''
    type: str
    author: str = ''
    date: str = ''
    tags: list[str] = []
    link: str = DEFAULT_LINK
    likes: int = 0
    content: str = ''
    created_at: int | None = None

    class Config:
        from_attributes = True

    @field_validator('tags', mode='before')
    @classmethod
    def decode_tags(cls, value: Any) -> list[str]:
        return parse_tags(value)

    @field_validator('title', mode='before')
    @classmethod
    def default_title(cls, value: Any) -> str:
        return value or DEFAULT_TITLE

    @field_validator('type', mode='before')
    @classmethod
    def default_type(cls, value: Any) -> str:
        return value or DEFAULT_TYPE

    @field_validator('link', mode='before')
    @classmethod
    def default_link(cls, value: Any) -> str:
        return value or DEFAULT_LINK

    @field_validator('description', 'author', 'date', 'content', mode='before')
    @classmethod
    def default_empty_text(cls, value: Any) -> str:
        return value or ''

    @field_validator('likes', mode='before')
    @classmethod
    def default_likes(cls, value: Any) -> int:
        return value or 0


def today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def build_resource_fields(payload: ResourcePayload) -> dict:
    """Fill defaults for every column a client may leave out."""
    return {
        'title': payload.title or DEFAULT_TITLE,
        'description': payload.description or '',
        'type': payload.type or DEFAULT_TYPE,
        'author': payload.author or DEFAULT_AUTHOR,
        'date': payload.date or today(),
        'tags': list(payload.tags),
        'link': payload.link or DEFAULT_LINK,
        'likes': payload.likes,
        'content': payload.content or '',
    }


def ensure_database_ready() -> None:
    try:
        ensure_resource_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL.',
        ) from exc


def _store_failure(db: Session, message: str, exc: Exception) -> HTTPException:
    db.rollback()
    logger.exception(message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={'error': message, 'details': str(exc)},
    )


@router.get('', response_model=list[ResourceResponse])
def list_resources(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        rows = db.query(Resource).order_by(Resource.created_at.desc()).all()
    except SQLAlchemyError as exc:
        raise _store_failure(db, 'Failed to fetch resources', exc) from exc

    return [ResourceResponse.model_validate(row) for row in rows]


@router.post('')
def create_resource(payload: ResourcePayload, db: Session = Depends(get_db)):
    ensure_database_ready()

    fields = build_resource_fields(payload)
    resource_id = payload.id or str(uuid.uuid4())
    created_at = int(datetime.now(timezone.utc).timestamp())

    try:
        db.add(
            Resource(
                id=resource_id,
                created_at=created_at,
                **{**fields, 'tags': json.dumps(fields['tags'], ensure_ascii=False)},
            )
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, '数据库写入失败', exc) from exc

    logger.info('Created resource %s', resource_id)
    return {'success': True, 'resource': {'id': resource_id, 'title': fields['title']}}


@router.put('')
def update_resource(payload: ResourcePayload, db: Session = Depends(get_db)):
    if not payload.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Missing ID')

    ensure_database_ready()

    fields = build_resource_fields(payload)

    try:
        resource = db.get(Resource, payload.id)
        if resource is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Resource not found')

        for column, value in fields.items():
            if column == 'tags':
                value = json.dumps(value, ensure_ascii=False)
            setattr(resource, column, value)
        db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, 'Failed to update resource', exc) from exc

    logger.info('Updated resource %s', payload.id)
    return {'success': True, 'resource': {'id': payload.id, **fields}}


@router.delete('')
def delete_resource(
    resource_id: str | None = Query(default=None, alias='id'),
    db: Session = Depends(get_db),
):
    if not resource_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Missing ID')

    ensure_database_ready()

    try:
        db.query(Resource).filter(Resource.id == resource_id).delete()
        db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, 'Failed to delete resource', exc) from exc

    logger.info('Deleted resource %s', resource_id)
    return {'success': True}
