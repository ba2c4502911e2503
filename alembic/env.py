from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from storefront.core.config import settings
from storefront.db.session import Base
import storefront.db.models  # noqa

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

VERSION_TABLE = "alembic_version_storefront"


def database_url() -> str:
    # precedence: `alembic -x url=...`, then sqlalchemy.url in alembic.ini, then DATABASE_URL
    return (
        context.get_x_argument(as_dictionary=True).get("url")
        or config.get_main_option("sqlalchemy.url")
        or settings.DATABASE_URL
    )


def configure(sqlite: bool, **kwargs):
    context.configure(
        target_metadata=target_metadata,
        version_table=VERSION_TABLE,
        compare_type=True,
        # SQLite cannot ALTER most columns in place
        render_as_batch=sqlite,
        **kwargs,
    )


def run_migrations_offline():
    url = database_url()
    configure(url.startswith("sqlite"), url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    url = database_url()
    connectable = create_engine(url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        configure(connection.dialect.name == "sqlite", connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
