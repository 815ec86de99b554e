import json
import logging
from typing import Optional, Tuple

import click

from .config import Settings
from .engine import AngleMode
from .errors import UnknownKey
from .history import open_store
from .keypad import tokenize
from .session import CalculatorSession


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("--db", "db_path", default=None, help="History database path (':memory:' for none)")
@click.option("--log-level", default=None, help="Logging level (default: SCICALC_LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx: click.Context, db_path: Optional[str], log_level: Optional[str]) -> None:
    """Scientific calculator with per-user history."""
    settings = Settings.from_env().with_overrides(db_path=db_path, log_level=log_level)
    _setup_logging(settings.log_level)
    ctx.obj = settings


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Host to bind to")
@click.option("--port", default=5000, show_default=True, help="Port to bind to")
@click.option("--debug", is_flag=True, default=False, help="Run Flask in debug mode")
@click.pass_obj
def serve(settings: Settings, host: str, port: int, debug: bool) -> None:
    """Run the web API."""
    from .webapp import configure

    app = configure(settings)
    click.echo(f"History database: {settings.db_path}", err=True)
    click.echo(f"Access at: http://{host}:{port}", err=True)
    app.run(host=host, port=port, debug=debug)


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--user", default=None, help="Save completed calculations for this user id")
@click.option(
    "--angle",
    type=click.Choice([m.value for m in AngleMode]),
    default=AngleMode.DEGREES.value,
    show_default=True,
)
@click.pass_obj
def press(settings: Settings, keys: Tuple[str, ...], user: Optional[str], angle: str) -> None:
    """Press KEYS in order and print the resulting display.

    Example: scicalc press 7 + 3 × 2 =
    """
    store = open_store(settings.db_path if user else ":memory:")
    calc = CalculatorSession(user, store, background=False)
    calc.dispatch("angle_mode", angle)
    try:
        for key in tokenize(" ".join(keys)):
            calc.press(key)
    except UnknownKey as e:
        raise click.BadParameter(str(e), param_hint="KEYS")

    click.echo(
        json.dumps(
            {
                "display": calc.state.display,
                "memory": calc.snapshot()["memory"],
                "calculations": list(reversed(calc.local_history)),
            },
            ensure_ascii=False,
        )
    )


@main.command()
@click.option("--user", required=True, help="User id whose history to list")
@click.option("--limit", default=None, type=int, help="Maximum rows (default: 20)")
@click.pass_obj
def history(settings: Settings, user: str, limit: Optional[int]) -> None:
    """Print a user's recent calculations, newest first."""
    store = open_store(settings.db_path)
    for record in store.list_recent(user, limit if limit is not None else settings.history_limit):
        click.echo(json.dumps(record.to_dict(), ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
