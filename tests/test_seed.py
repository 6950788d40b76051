import pytest
from sqlalchemy import text
from sqlalchemy.future import select

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME
from ladder.auth import verify_password
from ladder.config import ConfigError
from ladder.models import Player, User
from seed_database import SEED_PLAYERS, seed


async def all_rows(db, model):
    async with db.session() as session:
        return (await session.execute(select(model).order_by(model.id))).scalars().all()


@pytest.mark.asyncio
async def test_seed_creates_admin_and_roster(db, settings):
    await seed(db, settings)

    users = await all_rows(db, User)
    assert [u.username for u in users] == [ADMIN_USERNAME]
    assert verify_password(ADMIN_PASSWORD, users[0].password_hash)

    players = await all_rows(db, Player)
    assert [p.name for p in players] == SEED_PLAYERS
    assert all(p.victories == 0 for p in players)


@pytest.mark.asyncio
async def test_reseeding_replaces_admin_and_keeps_players(db, settings):
    await seed(db, settings)
    await seed(db, settings)

    assert len(await all_rows(db, User)) == 1
    assert len(await all_rows(db, Player)) == len(SEED_PLAYERS)


@pytest.mark.asyncio
async def test_seed_with_drop_resets_victories(db, settings):
    await seed(db, settings, players=["A"])
    async with db.session() as session:
        player = (await session.execute(select(Player))).scalar_one()
        player.victories = 5
        await session.commit()

    await seed(db, settings, drop=True, players=["A"])

    players = await all_rows(db, Player)
    assert [(p.name, p.victories) for p in players] == [("A", 0)]
    async with db.session() as session:
        version = (await session.execute(text("SELECT version_num FROM alembic_version"))).scalar_one()
    assert version == "0001"


@pytest.mark.asyncio
async def test_seed_requires_admin_credentials(db, settings):
    with pytest.raises(ConfigError):
        await seed(db, settings.model_copy(update={"admin_password": None}))

    assert await all_rows(db, User) == []


@pytest.mark.asyncio
async def test_seeded_admin_can_log_in(client, db, settings):
    await seed(db, settings)

    response = await client.post("/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_seed_rejects_overlong_admin_password(db, settings):
    with pytest.raises(ConfigError):
        await seed(db, settings.model_copy(update={"admin_password": "x" * 73}))

    assert await all_rows(db, User) == []
