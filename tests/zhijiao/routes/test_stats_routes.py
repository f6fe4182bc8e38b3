import pytest
from sqlalchemy import text

from zhijiao.models.stat import Stat
from zhijiao.routes import stats_routes
from zhijiao.routes.stats_routes import VISITOR_COUNT_KEY, get_stats, initialize_counter, record_visit


def test_get_initializes_missing_counter(db) -> None:
    assert get_stats(db=db) == {'visitor_count': 0}
    assert db.get(Stat, VISITOR_COUNT_KEY).value == 0


def test_get_returns_existing_value(db) -> None:
    db.add(Stat(key=VISITOR_COUNT_KEY, value=41))
    db.commit()

    assert get_stats(db=db) == {'visitor_count': 41}


def test_two_increments_add_exactly_two(db) -> None:
    db.add(Stat(key=VISITOR_COUNT_KEY, value=10))
    db.commit()

    first = record_visit(db=db)
    second = record_visit(db=db)

    assert first == {'visitor_count': 11}
    assert second == {'visitor_count': 12}


def test_increment_creates_missing_counter(db) -> None:
    assert record_visit(db=db) == {'visitor_count': 1}
    assert record_visit(db=db) == {'visitor_count': 2}


def _insert_counter_behind_session(db, value: int) -> None:
    db.execute(text('INSERT INTO stats (key, value) VALUES (:key, :value)'), {'key': VISITOR_COUNT_KEY, 'value': value})
    db.commit()


def test_initialize_counter_rereads_row_created_concurrently(db) -> None:
    _insert_counter_behind_session(db, 5)

    assert initialize_counter(db) == 5


def test_get_survives_losing_the_insert_race(db, monkeypatch: pytest.MonkeyPatch) -> None:
    real_read_counter = stats_routes.read_counter
    reads = []

    def racing_read_counter(session, key=VISITOR_COUNT_KEY):
        reads.append(key)
        if len(reads) == 1:
            _insert_counter_behind_session(session, 3)
            return None
        return real_read_counter(session, key)

    monkeypatch.setattr(stats_routes, 'read_counter', racing_read_counter)

    assert get_stats(db=db) == {'visitor_count': 3}
