import json
import sys
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError

from .config import ThrottlerConfig
from .settings import ThrottlerSettings

app = typer.Typer(help="freno-throttler operational CLI")


def _settings(app_name: Optional[str], wait_seconds: Optional[float], max_wait_seconds: Optional[float]):
    overrides = {
        "app": app_name,
        "wait_seconds": wait_seconds,
        "max_wait_seconds": max_wait_seconds,
    }
    try:
        return ThrottlerSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        for err in e.errors():
            msg = f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            logger.error(msg)
            typer.echo(msg, err=True)
        sys.exit(1)


def app_opt() -> Optional[str]:
    return typer.Option(None, "--app", help="App identifier sent to freno")


def wait_opt() -> Optional[float]:
    return typer.Option(None, "--wait-seconds", help="Poll interval in seconds")


def max_wait_opt() -> Optional[float]:
    return typer.Option(None, "--max-wait-seconds", help="Maximum total wait in seconds")


@app.command("show-config")
def show_config(
    app_name: Optional[str] = app_opt(),
    wait_seconds: Optional[float] = wait_opt(),
    max_wait_seconds: Optional[float] = max_wait_opt(),
):
    """Print the resolved throttler settings as JSON."""
    s = _settings(app_name, wait_seconds, max_wait_seconds)
    typer.echo(json.dumps(s.model_dump(), indent=2))


@app.command("validate")
def validate(
    app_name: Optional[str] = app_opt(),
    wait_seconds: Optional[float] = wait_opt(),
    max_wait_seconds: Optional[float] = max_wait_opt(),
):
    """Check the settings against the throttler's construction rules.

    Client and mapper are wired in code, so only app and timings are checked.
    """
    s = _settings(app_name, wait_seconds, max_wait_seconds)
    cfg = ThrottlerConfig(
        client=object(),
        app=s.app,
        mapper=object(),
        wait_seconds=s.wait_seconds,
        max_wait_seconds=s.max_wait_seconds,
    )
    errors = cfg.errors()
    if errors:
        for err in errors:
            logger.error(err)
            typer.echo(err, err=True)
        sys.exit(1)

    logger.success(f"Throttler settings valid for app={s.app}")
    typer.echo("ok")


if __name__ == "__main__":
    app()
