"""
kvs3 CLI - Typer entry point

Commands: serve, namespace
"""

import logging
import sys
from typing import Optional

import typer
import uvicorn

from kvs3.config import Settings
from kvs3.http_server import create_app
from kvs3.namespace import derive_namespace

app = typer.Typer()

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@app.command()
def serve(
    address: Optional[str] = typer.Option(None, "--address", "-a", help="host:port to listen on"),
    bucket: Optional[str] = typer.Option(None, "--bucket", "-b"),
    region: Optional[str] = typer.Option(None, "--region", "-r"),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="custom S3 endpoint URL"),
    origin: Optional[str] = typer.Option(None, "--origin", "-o", help="allowed CORS origin"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    memory: bool = typer.Option(False, "--memory", help="keep data in process memory instead of S3"),
) -> None:
    """Run the HTTP server."""
    settings = Settings().with_overrides(
        address=address,
        bucket=bucket,
        region=region,
        endpoint=endpoint,
        origin=origin,
        log_level=log_level,
    )
    configure_logging(settings.log_level)
    try:
        host, port = settings.host, settings.port
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    store = None
    if memory:
        from kvs3.storage.memory import MemoryStore

        store = MemoryStore()
    api = create_app(settings, store)

    logger = logging.getLogger("kvs3")
    logger.info("Starting kvs3 on http://%s:%s (bucket=%s)", host, port, settings.bucket)
    uvicorn.run(api, host=host, port=port, log_level=settings.log_level.lower())


@app.command()
def namespace(token: str = typer.Argument("", help="bearer token (empty for anonymous callers)")) -> None:
    """Print the bucket prefix a bearer token maps to."""
    typer.echo(derive_namespace(f"Bearer {token}"))


if __name__ == "__main__":
    app()
