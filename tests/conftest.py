import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func
from sqlalchemy.future import select

from ladder.auth import create_access_token, hash_password
from ladder.config import Settings
from ladder.main import create_app
from ladder.models import Match, Player, User

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret="test-secret",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ladder.db'}",
        bcrypt_rounds=4,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await app.state.db.create_all()
    yield app
    await app.state.db.dispose()


@pytest.fixture
def db(app):
    return app.state.db


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def admin(db):
    async with db.session() as session:
        user = User(username=ADMIN_USERNAME, password_hash=hash_password(ADMIN_PASSWORD, rounds=4))
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
def auth_headers(admin, settings):
    token = create_access_token({"id": admin.id, "username": admin.username}, settings)
    return {"Authorization": f"Bearer {token}"}


async def seed_players(db, *names, victories=0):
    async with db.session() as session:
        for name in names:
            session.add(Player(name=name, victories=victories))
        await session.commit()


async def get_victories(db, name):
    async with db.session() as session:
        result = await session.execute(select(Player.victories).where(Player.name == name))
        return result.scalar_one()


async def count_matches(db):
    async with db.session() as session:
        return (await session.execute(select(func.count(Match.id)))).scalar_one()
