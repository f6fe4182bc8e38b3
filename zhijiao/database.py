from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from zhijiao.core import config


connect_args = {'check_same_thread': False} if config.DATABASE_URL.startswith('sqlite') else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_resource_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_resource_schema() -> None:
    global _resource_schema_checked

    if _resource_schema_checked:
        return

    with _schema_lock:
        if _resource_schema_checked:
            return

        inspector = inspect(engine)

        if 'resources' not in inspector.get_table_names():
            _resource_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('resources')}
        migration_steps = [
            ('content', 'ALTER TABLE resources ADD COLUMN content TEXT'),
            ('created_at', 'ALTER TABLE resources ADD COLUMN created_at INTEGER'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_resources_created_at ON resources(created_at)')
            )

        _resource_schema_checked = True
