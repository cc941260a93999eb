"""
Test infrastructure for the Market Board API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- ``create_app`` receives explicit test settings and the test engine, so
  no production configuration is ever read.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state.
- Authenticated requests carry an ``access-token`` cookie signed with the
  same helpers the application uses.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import ACCESS_TOKEN_COOKIE_NAME, Settings
from app.database import Base, configure_engine
from app.main import create_app
from app.models import User
from app.security import create_access_token, hash_password

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "password123"

# bcrypt is slow on purpose; hash the shared test password once.
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

engine_test = configure_engine(
    create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


def auth_headers(user_id: int, settings: Settings) -> dict[str, str]:
    """Request headers carrying a valid access-token cookie for *user_id*."""
    token = create_access_token(user_id, settings)
    return {"Cookie": f"{ACCESS_TOKEN_COOKIE_NAME}={token}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=TEST_DATABASE_URL,
        JWT_ACCESS_TOKEN_SECRET="test-access-secret-0123456789abcdef",
        JWT_REFRESH_TOKEN_SECRET="test-refresh-secret-0123456789abcdef",
        APP_ENV="test",
        PUBLIC_PATH=str(tmp_path / "public"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings, engine=engine_test)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that need to interact with the
    database directly (seeding data, calling services, asserting state).
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(app) -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_user():
    """
    Factory that inserts a user directly and returns it.

    Every user shares ``TEST_PASSWORD`` so login tests can authenticate.
    """

    async def _make_user(email: str = "user@example.com", nickname: str = "user") -> User:
        async with async_session_test() as session:
            user = User(email=email, nickname=nickname, password=TEST_PASSWORD_HASH)
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def login_as(settings):
    """Return ``auth_headers`` bound to the test settings."""

    def _login_as(user: User) -> dict[str, str]:
        return auth_headers(user.id, settings)

    return _login_as
