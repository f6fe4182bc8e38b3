import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from zhijiao.database import get_db
from zhijiao.models.stat import Stat

router = APIRouter(tags=['stats'])

logger = logging.getLogger(__name__)

VISITOR_COUNT_KEY = 'visitor_count'


def read_counter(db: Session, key: str = VISITOR_COUNT_KEY) -> int | None:
    stat = db.get(Stat, key)
    if stat is None:
        return None
    db.refresh(stat)
    return stat.value or 0


def increment_counter(db: Session, key: str = VISITOR_COUNT_KEY) -> int:
    result = db.execute(
        update(Stat).where(Stat.key == key).values(value=Stat.value + 1)
    )
    if result.rowcount == 0:
        db.add(Stat(key=key, value=1))
    db.commit()
    return read_counter(db, key) or 0


def initialize_counter(db: Session, key: str = VISITOR_COUNT_KEY) -> int:
    db.add(Stat(key=key, value=0))
    try:
        db.commit()
    except IntegrityError:
        # another request created the row first
        db.rollback()
        return read_counter(db, key) or 0
    return 0


@router.get('')
def get_stats(db: Session = Depends(get_db)):
    try:
        visitor_count = read_counter(db)
        if visitor_count is None:
            visitor_count = initialize_counter(db)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to read visitor count')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return {'visitor_count': visitor_count}


@router.post('')
def record_visit(db: Session = Depends(get_db)):
    try:
        visitor_count = increment_counter(db)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to increment visitor count')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return {'visitor_count': visitor_count}
