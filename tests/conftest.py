import os
import sqlite3
import uuid

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv(os.path.join(os.getcwd(), ".env"))
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_ALGORITHM", "HS256")

# Register UUID adapter for SQLite - store as string
sqlite3.register_adapter(uuid.UUID, lambda u: str(u))

# Monkey-patch SQLAlchemy's UUID type for SQLite compatibility
# This must happen before any models are imported
from sqlalchemy.sql import sqltypes  # noqa: E402

_original_uuid_bind_processor = sqltypes.Uuid.bind_processor
_original_uuid_result_processor = sqltypes.Uuid.result_processor


def _sqlite_uuid_bind_processor(self, dialect):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return str(value)
                return str(uuid.UUID(value)) if value else None
            return None
        return process
    return _original_uuid_bind_processor(self, dialect)


def _sqlite_uuid_result_processor(self, dialect, coltype):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return value
                return uuid.UUID(value) if value else None
            return None
        return process
    return _original_uuid_result_processor(self, dialect, coltype)


sqltypes.Uuid.bind_processor = _sqlite_uuid_bind_processor
sqltypes.Uuid.result_processor = _sqlite_uuid_result_processor

from jose import jwt  # noqa: E402

from app.config import settings  # noqa: E402
from app.db import Base  # noqa: E402
from app.models.employee import Employee  # noqa: E402


def _resolve_test_database_url() -> str | None:
    raw_url = os.getenv("TEST_DATABASE_URL")
    if not raw_url:
        return None

    url = make_url(raw_url)
    if url.drivername.startswith("postgresql") and url.database != "hr_portal_test":
        url = url.set(database="hr_portal_test")
    return url.render_as_string(hide_password=False)


@pytest.fixture(scope="session")
def engine():
    database_url = _resolve_test_database_url()
    if database_url:
        # Use PostgreSQL for tests (recommended)
        engine = create_engine(database_url)
    else:
        engine = create_engine(
            "sqlite+pysqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        # pysqlite needs explicit BEGIN for SAVEPOINT to behave
        @event.listens_for(engine, "connect")
        def _sqlite_connect(dbapi_connection, _connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)

    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        autocommit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex}@example.com"


def make_employee(db_session, first_name="Test", last_name="User", role_name="Engineer", manager=None):
    employee = Employee(
        first_name=first_name,
        last_name=last_name,
        email=_unique_email(),
        role_name=role_name,
        manager_id=manager.id if manager else None,
    )
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


def make_token(employee_id, *roles: str) -> str:
    return jwt.encode(
        {"sub": str(employee_id), "roles": list(roles)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture()
def manager(db_session):
    return make_employee(db_session, first_name="Maya", last_name="Manager", role_name="Team Lead")


@pytest.fixture()
def employee(db_session, manager):
    return make_employee(db_session, first_name="Eli", last_name="Agent", role_name="Sales Agent", manager=manager)


@pytest.fixture()
def hr_head(db_session):
    return make_employee(db_session, first_name="Hana", last_name="People", role_name="HR Head")


@pytest.fixture()
def auth_headers():
    def _headers(employee_id, *roles: str) -> dict:
        return {"Authorization": f"Bearer {make_token(employee_id, *roles)}"}

    return _headers


@pytest.fixture()
def employee_factory(db_session):
    def _create(**kwargs):
        return make_employee(db_session, **kwargs)

    return _create
