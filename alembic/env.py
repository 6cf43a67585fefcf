import sys
from pathlib import Path
from logging.config import fileConfig
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from alembic import context
from sqlalchemy import engine_from_config, pool

# Ensure project root on sys.path
THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = THIS_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from app.Core.config import get_settings
from app.DB.base import Base, discover_feature_models
import app.DB.models  # noqa: F401

discover_feature_models()
settings = get_settings()


def _ensure_driver_and_ssl(url: str) -> str:
    """Force psycopg2 driver and sslmode=require for Supabase-style URLs."""
    if not url:
        return ""
    if url.startswith("postgresql://") and "+psycopg2://" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
    parsed = urlparse(url)
    q = dict(parse_qsl(parsed.query, keep_blank_values=True))
    if "sslmode" not in q:
        q["sslmode"] = "require"
    return urlunparse(parsed._replace(query=urlencode(q)))


MIGRATIONS_URL = _ensure_driver_and_ssl(settings.get_database_url())
if not MIGRATIONS_URL:
    raise RuntimeError("No DATABASE_URL configured.")

config = context.config
# Inject URL dynamically (avoid secrets in ini)
config.set_main_option("sqlalchemy.url", MIGRATIONS_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Owned by Supabase or the course authoring service
EXCLUDE_TABLES = {"users", "courses", "profiles", "user_profiles", "system_settings"}


def include_object(object, name, type_, reflected, compare_to):
    if type_ == "table" and name in EXCLUDE_TABLES:
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=MIGRATIONS_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {}).copy()
    section["sqlalchemy.url"] = MIGRATIONS_URL
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            include_object=include_object,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
