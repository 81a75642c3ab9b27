from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from codegallery.core import config


DATABASE_URL = config.DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_project_schema_checked = False


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection.
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_project_schema() -> None:
    global _project_schema_checked

    if _project_schema_checked:
        return

    with _schema_lock:
        if _project_schema_checked:
            return

        inspector = inspect(engine)
        table_names = set(inspector.get_table_names())

        if 'projects' not in table_names:
            _project_schema_checked = True
            return

        index_statements = [
            'CREATE INDEX IF NOT EXISTS idx_projects_visibility_created ON projects(visibility, created_at)',
            'CREATE INDEX IF NOT EXISTS idx_projects_visibility_views ON projects(visibility, views)',
            'CREATE INDEX IF NOT EXISTS idx_projects_visibility_likes ON projects(visibility, likes_count)',
        ]
        if 'user_follows' in table_names:
            index_statements.append(
                'CREATE INDEX IF NOT EXISTS idx_user_follows_following_created '
                'ON user_follows(following_id, created_at)'
            )

        with engine.begin() as connection:
            for statement in index_statements:
                connection.execute(text(statement))

        _project_schema_checked = True
