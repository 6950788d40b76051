import argparse
import asyncio
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import delete, text
from sqlalchemy.future import select

from ladder.auth import MAX_PASSWORD_BYTES, hash_password, password_too_long
from ladder.config import ConfigError, Settings
from ladder.database import Database
from ladder.models import Player, User

SEED_PLAYERS = [
    "Vesko Lazarevic",
    "Danilo Kujacic",
    "Danilo Zagarcanin",
    "Predrag Zunjic",
    "Marko Cekaj",
    "Stefan Braunovic",
    "Milos Ivanis",
]

ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def upgrade_schema(database_url: str):
    config = AlembicConfig(str(ALEMBIC_INI))
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    command.upgrade(config, "head")


async def reset_schema(db: Database, settings: Settings):
    """Drop every table and rebuild the schema through the migrations, triggers included."""
    print("⚠️ Dropping all tables...")
    await db.drop_all()
    async with db.engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))

    print("🔁 Running migrations...")
    # alembic's env.py starts its own event loop
    await asyncio.to_thread(upgrade_schema, settings.database_url)
    print("✅ Tables recreated.")


async def seed(db: Database, settings: Settings, drop: bool = False, players=SEED_PLAYERS):
    if not settings.admin_username or not settings.admin_password:
        raise ConfigError("Username and password for admin must be provided")
    if password_too_long(settings.admin_password):
        raise ConfigError(f"Admin password cannot be longer than {MAX_PASSWORD_BYTES} bytes")

    if drop:
        await reset_schema(db, settings)

    async with db.session() as session:
        await session.execute(delete(User))
        print("🗑️ Cleared existing users")

        session.add(User(
            username=settings.admin_username,
            password_hash=hash_password(settings.admin_password, settings.bcrypt_rounds),
        ))
        print(f"✅ Created user: {settings.admin_username}")

        existing = set((await session.execute(select(Player.name))).scalars().all())
        for name in players:
            if name in existing:
                print(f"↪️ Player already exists: {name}")
                continue
            session.add(Player(name=name, victories=0))
            print(f"✅ Created player: {name}")

        await session.commit()


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the admin user and player roster.")
    parser.add_argument("-d", "--drop", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args(argv)

    settings = Settings.from_env(require_jwt_secret=False)
    db = Database(settings)
    try:
        await seed(db, settings, drop=args.drop)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1
    finally:
        await db.dispose()

    print("✨ Database seeding completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
