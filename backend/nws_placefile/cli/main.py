import logging
import os
from datetime import timedelta
from functools import partial
from pathlib import Path
from typing import Callable, Optional

import typer
import uvicorn

from nws_placefile.api.main import create_app
from nws_placefile.domain.models import PlacefileOptions
from nws_placefile.domain.placefile import serialize_placefile
from nws_placefile.domain.placefile_builder import build_placefile
from nws_placefile.infra.snapshots import DEFAULT_SNAPSHOT_PATH, resolve_snapshot_store
from nws_placefile.providers.alerts.nws import NwsAlertsProvider
from nws_placefile.services.refresh_scheduler import DEFAULT_POLL_INTERVAL, RefreshScheduler

DEFAULT_MODE = os.getenv("APP_ENV", "production")
DEFAULT_HOST = os.getenv("PLACEFILE_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("PLACEFILE_PORT", "3525"))
DEFAULT_REFRESH_SECONDS = int(os.getenv("PLACEFILE_REFRESH_SECONDS", "180"))
DEFAULT_DEV_REFRESH_SECONDS = int(os.getenv("PLACEFILE_DEV_REFRESH_SECONDS", "60"))
DEFAULT_OUTPUT = Path(os.getenv("PLACEFILE_OUTPUT", "placefile.pl"))
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer(help="Serve NWS active warnings as a radar placefile")


@app.callback()
def configure(log_level: str = typer.Option("INFO", help="Logging level")):
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)


def build_scheduler(
    *,
    refresh_seconds: int,
    snapshot: Path,
    on_document: Optional[Callable[[str], None]] = None,
) -> RefreshScheduler:
    refresh = timedelta(seconds=refresh_seconds)
    scheduler = RefreshScheduler(
        NwsAlertsProvider(),
        resolve_snapshot_store(path=snapshot),
        refresh_interval=refresh,
        options=PlacefileOptions(refresh=refresh),
        on_document=on_document,
    )
    scheduler.seed()
    return scheduler


def serve_placefile(*, host: str, port: int, refresh_seconds: int, snapshot: Path, poll_interval: float) -> int:
    scheduler = build_scheduler(refresh_seconds=refresh_seconds, snapshot=snapshot)
    server = uvicorn.Server(uvicorn.Config(create_app(scheduler.state), host=host, port=port, log_level="info"))

    def _shutdown(exc: Exception) -> None:
        server.should_exit = True

    scheduler.on_fatal = _shutdown
    scheduler.start(poll_interval)
    logger.info("[cli] Listening on %s:%d (refresh every %ds)", host, port, refresh_seconds)
    try:
        server.run()
    finally:
        scheduler.stop(timeout=5)
    return 1 if scheduler.fatal_error is not None else 0


def _write_placefile(output: Path, document: str) -> None:
    output.write_text(document, encoding="utf-8")
    logger.info("[cli] Updated placefile.")


def dev_placefile(*, output: Path, refresh_seconds: int, snapshot: Path, poll_interval: float) -> int:
    scheduler = build_scheduler(
        refresh_seconds=refresh_seconds,
        snapshot=snapshot,
        on_document=partial(_write_placefile, output),
    )
    logger.info("[cli] Getting latest NWS data...")
    logger.info("[cli] Updating %s every %d seconds.", output, refresh_seconds)
    try:
        scheduler.run_forever(poll_interval)
    except KeyboardInterrupt:
        return 0
    return 1 if scheduler.fatal_error is not None else 0


@app.command("serve")
def cli_serve(
    host: str = typer.Option(DEFAULT_HOST, help="Bind address"),
    port: int = typer.Option(DEFAULT_PORT, help="Listening port"),
    refresh_seconds: int = typer.Option(DEFAULT_REFRESH_SECONDS, help="Seconds between feed fetches"),
    snapshot: Path = typer.Option(DEFAULT_SNAPSHOT_PATH, help="Raw alerts snapshot file"),
    poll_interval: float = typer.Option(DEFAULT_POLL_INTERVAL, help="Max seconds between staleness checks"),
):
    """Production mode: refresh on a timer and serve the placefile over HTTP."""
    code = serve_placefile(
        host=host, port=port, refresh_seconds=refresh_seconds, snapshot=snapshot, poll_interval=poll_interval
    )
    raise typer.Exit(code=code)


@app.command("dev")
def cli_dev(
    output: Path = typer.Option(DEFAULT_OUTPUT, help="Placefile written after every refresh"),
    refresh_seconds: int = typer.Option(DEFAULT_DEV_REFRESH_SECONDS, help="Seconds between feed fetches"),
    snapshot: Path = typer.Option(DEFAULT_SNAPSHOT_PATH, help="Raw alerts snapshot file"),
    poll_interval: float = typer.Option(DEFAULT_POLL_INTERVAL, help="Max seconds between staleness checks"),
):
    """Development mode: faster refresh, dump the placefile to disk, no HTTP."""
    code = dev_placefile(
        output=output, refresh_seconds=refresh_seconds, snapshot=snapshot, poll_interval=poll_interval
    )
    raise typer.Exit(code=code)


@app.command("run")
def cli_run(
    mode: str = typer.Option(DEFAULT_MODE, envvar="APP_ENV", help="production or development"),
    snapshot: Path = typer.Option(DEFAULT_SNAPSHOT_PATH, help="Raw alerts snapshot file"),
):
    """Pick serve or dev from APP_ENV."""
    if mode.lower() == "development":
        code = dev_placefile(
            output=DEFAULT_OUTPUT,
            refresh_seconds=DEFAULT_DEV_REFRESH_SECONDS,
            snapshot=snapshot,
            poll_interval=DEFAULT_POLL_INTERVAL,
        )
    else:
        code = serve_placefile(
            host=DEFAULT_HOST,
            port=DEFAULT_PORT,
            refresh_seconds=DEFAULT_REFRESH_SECONDS,
            snapshot=snapshot,
            poll_interval=DEFAULT_POLL_INTERVAL,
        )
    raise typer.Exit(code=code)


@app.command("render")
def cli_render(
    snapshot: Path = typer.Option(DEFAULT_SNAPSHOT_PATH, help="Raw alerts snapshot file"),
    output: Optional[Path] = typer.Option(None, help="Write here instead of stdout"),
    refresh_seconds: int = typer.Option(DEFAULT_REFRESH_SECONDS, help="Refresh directive in the placefile"),
    title: Optional[str] = typer.Option(None, help="Placefile title"),
):
    """Render the stored snapshot without touching the network."""
    payload = resolve_snapshot_store(path=snapshot).load()
    if payload is None:
        typer.echo("No stored alerts snapshot found", err=True)
        raise typer.Exit(code=1)
    options = PlacefileOptions(title=title, refresh=timedelta(seconds=refresh_seconds))
    document = serialize_placefile(build_placefile(payload, options))
    if output is None:
        typer.echo(document)
        raise typer.Exit(code=0)
    output.write_text(document, encoding="utf-8")
    typer.echo(f"Wrote {output} ({len(document)} bytes)")


if __name__ == "__main__":
    app()
