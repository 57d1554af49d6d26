"""Settings: defaults, environment overrides, and database URL resolution."""

import pytest
from pydantic import ValidationError
from sqlalchemy.engine import make_url

from student_records.config import Settings

DB_ENV = (
    "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DATABASE_URL",
    "PORT", "RESPONSE_MODE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in DB_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    """Defaults match the stock local MySQL setup on port 3000."""
    settings = Settings(_env_file=None)
    assert settings.db_host == "localhost"
    assert settings.db_user == "root"
    assert settings.db_password == "password"
    assert settings.db_name == "students_db"
    assert settings.port == 3000
    assert settings.db_queue_limit == 0
    assert settings.response_mode == "auto"


def test_default_url_targets_mysql(clean_env):
    url = Settings(_env_file=None).sqlalchemy_url()
    assert url.drivername == "mysql+aiomysql"
    assert (url.host, url.port, url.database) == ("localhost", 3306, "students_db")
    assert url.username == "root"


def test_environment_overrides(clean_env):
    """DB_* and PORT environment variables override defaults."""
    clean_env.setenv("DB_HOST", "db.internal")
    clean_env.setenv("DB_NAME", "roster")
    clean_env.setenv("PORT", "8080")
    settings = Settings(_env_file=None)
    assert settings.sqlalchemy_url().host == "db.internal"
    assert settings.sqlalchemy_url().database == "roster"
    assert settings.port == 8080


def test_password_is_escaped_in_url(clean_env):
    """Reserved characters in the password survive URL composition."""
    clean_env.setenv("DB_PASSWORD", "p@ss/word")
    url = Settings(_env_file=None).sqlalchemy_url()
    rendered = url.render_as_string(hide_password=False)
    assert "p@ss/word" not in rendered
    assert make_url(rendered).password == "p@ss/word"


def test_database_url_wins(clean_env):
    """DATABASE_URL replaces the URL composed from DB_* parts."""
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///local.db")
    clean_env.setenv("DB_HOST", "ignored")
    url = Settings(_env_file=None).sqlalchemy_url()
    assert url.get_backend_name() == "sqlite"


def test_blank_database_url_is_unset(clean_env):
    """A whitespace DATABASE_URL falls back to the composed URL."""
    clean_env.setenv("DATABASE_URL", "  ")
    assert Settings(_env_file=None).database_url is None


def test_pool_size_must_be_positive(clean_env):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, db_pool_size=0)


def test_response_mode_is_restricted(clean_env):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, response_mode="xml")
