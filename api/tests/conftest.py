import os

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from betroyal.main import app
from betroyal.config import settings
from betroyal.db.database import Base, get_db
from betroyal.models.user import UserRole
from betroyal.schemas.user import UserCreate
from betroyal.services.account_store import AccountStore
from betroyal.services.bootstrap import ensure_admin, ensure_games


# Test database URL (in-memory SQLite unless overridden)
TEST_DATABASE_URL = os.environ.get('TEST_DATABASE_URL', 'sqlite+aiosqlite://')

if TEST_DATABASE_URL.startswith('sqlite'):
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
else:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

PLAYER_PASSWORD = 'secret123'


async def override_get_db():
    """Override database dependency for tests."""
    async with TestSession() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def setup_db():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session(setup_db):
    """Database session for direct queries in tests."""
    async with TestSession() as session:
        yield session
        await session.rollback()


@pytest.fixture
def session_factory(setup_db):
    """Sessions bound to the test database, for code that opens its own."""
    return TestSession


@pytest.fixture
async def user(db_session):
    """A committed player with the starting balance."""
    user = await AccountStore(db_session).create_user(UserCreate(
        username='player',
        password=PLAYER_PASSWORD,
        email='player@example.com',
    ))
    await db_session.commit()
    return user


@pytest.fixture
async def games(setup_db):
    async with TestSession() as session:
        await ensure_games(session)
        await session.commit()


@pytest.fixture
async def client(setup_db):
    """Async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
async def player_client(client):
    """Client logged in as a freshly registered player."""
    response = await client.post('/api/register', json={
        'username': 'player',
        'password': PLAYER_PASSWORD,
        'email': 'player@example.com',
        'fullName': 'Test Player',
    })
    assert response.status_code == 201
    return client


@pytest.fixture
async def admin_client(setup_db):
    """Separate client logged in as the bootstrap admin."""
    async with TestSession() as session:
        await ensure_admin(session)
        await session.commit()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        response = await ac.post('/api/login', json={
            'username': settings.admin_username,
            'password': settings.admin_password,
        })
        assert response.status_code == 200
        assert response.json()['role'] == UserRole.ADMIN.value
        yield ac
