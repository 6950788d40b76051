import pydantic
import pytest
from httpx import ASGITransport, AsyncClient

from ladder import config
from ladder.config import ConfigError, Settings
from ladder.main import create_app


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_missing_secret_refuses_to_start(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)

    with pytest.raises(ConfigError):
        Settings.from_env()
    with pytest.raises(ConfigError):
        create_app()


def test_seed_settings_do_not_need_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setenv("ADMIN_USERNAME", "root")

    assert Settings.from_env(require_jwt_secret=False).admin_username == "root"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "abc")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///ladder.db")
    monkeypatch.setenv("TOKEN_EXPIRE_DAYS", "3")
    monkeypatch.setenv("SQL_ECHO", "true")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.delenv("ADMIN_USERNAME", raising=False)

    settings = Settings.from_env()

    assert settings.jwt_secret == "abc"
    assert settings.token_expire_days == 3
    assert settings.sql_echo is True
    assert settings.port == 8080
    assert settings.is_sqlite
    assert settings.admin_username is None


def test_defaults(monkeypatch):
    for name in ("TOKEN_EXPIRE_DAYS", "PORT", "JWT_ALGORITHM", "BCRYPT_ROUNDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JWT_SECRET", "abc")

    settings = Settings.from_env()

    assert settings.token_expire_days == 7
    assert settings.jwt_algorithm == "HS256"
    assert settings.port == 3000
    assert settings.bcrypt_rounds == 10


def test_settings_are_immutable():
    settings = Settings(jwt_secret="abc")

    with pytest.raises(pydantic.ValidationError):
        settings.jwt_secret = "changed"


def test_allowed_hosts_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "abc")
    monkeypatch.setenv("ALLOWED_HOSTS", "ladder.example.com, api.example.com")

    assert Settings.from_env().allowed_hosts == ("ladder.example.com", "api.example.com")


@pytest.mark.asyncio
async def test_untrusted_host_is_rejected(settings):
    app = create_app(settings.model_copy(update={"allowed_hosts": ("ladder.example.com",)}))
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://evil.example.com") as ac:
        rejected = await ac.get("/")
    async with AsyncClient(transport=transport, base_url="http://ladder.example.com") as ac:
        accepted = await ac.get("/")
    await app.state.db.dispose()

    assert rejected.status_code == 400
    assert accepted.status_code == 200
