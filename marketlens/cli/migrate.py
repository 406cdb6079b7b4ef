"""
Database migration commands
"""

from pathlib import Path
from typing import Optional

import typer
from alembic import command
from alembic.config import Config

from marketlens.core.config import settings
from marketlens.core.logging import log, setup_logging

app = typer.Typer(help="Database migrations (Alembic)", no_args_is_help=True)

ConfigOption = typer.Option(Path("alembic.ini"), "--config", "-c", help="Path to alembic.ini")


def get_alembic_config(config_path: Path, database_url: Optional[str] = None) -> Config:
    """Alembic configuration pointed at the configured database"""
    if not config_path.exists():
        raise typer.BadParameter(f"{config_path} not found", param_hint="--config")

    config = Config(str(config_path))
    config.set_main_option("script_location", str(config_path.parent / "alembic"))
    # Read by alembic/env.py
    config.attributes["database_url"] = database_url or settings.database_url
    return config


@app.command()
def upgrade(revision: str = typer.Argument("head"), config_path: Path = ConfigOption):
    """Upgrade the database to a revision"""
    setup_logging()
    command.upgrade(get_alembic_config(config_path), revision)
    log.info("Database upgraded to {}", revision)


@app.command()
def downgrade(revision: str = typer.Argument("-1"), config_path: Path = ConfigOption):
    """Downgrade the database to a revision"""
    setup_logging()
    command.downgrade(get_alembic_config(config_path), revision)
    log.info("Database downgraded to {}", revision)


@app.command()
def revision(
    message: str = typer.Option(..., "--message", "-m", help="Revision message"),
    autogenerate: bool = typer.Option(True, help="Diff models against the database"),
    config_path: Path = ConfigOption,
):
    """Create a new migration"""
    setup_logging()
    command.revision(get_alembic_config(config_path), message=message, autogenerate=autogenerate)
    log.info("Created new migration: {}", message)


@app.command()
def current(config_path: Path = ConfigOption):
    """Show the current database revision"""
    command.current(get_alembic_config(config_path))


@app.command()
def history(config_path: Path = ConfigOption):
    """Show migration history"""
    command.history(get_alembic_config(config_path))
