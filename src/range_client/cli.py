"""range-query command line entry point."""

import asyncio
import sys
from typing import Optional

import click

from range_client.client import RangeClient
from range_client.config import Settings
from range_client.context import QueryContext
from range_client.exceptions import RangeClientError
from range_client.logging_config import configure_logging


async def _run(client: RangeClient, expression: str, timeout: Optional[float]) -> list[str]:
    async with client:
        with QueryContext(timeout=timeout) as ctx:
            return await client.query_with_deadline(ctx, expression)


@click.command()
@click.option("--server", "servers", multiple=True, help="Range server host:port (repeatable)")
@click.option("--timeout", type=float, default=None, help="Seconds before the query is abandoned")
@click.option("--retry-count", type=int, default=None, help="Retries after a failed attempt")
@click.option("--retry-pause", type=float, default=None, help="Seconds between retries")
@click.option("--log-level", default=None, help="Logging level (default from RANGE_LOG_LEVEL)")
@click.argument("expressions", nargs=-1, required=True)
def main(
    servers: tuple[str, ...],
    timeout: Optional[float],
    retry_count: Optional[int],
    retry_pause: Optional[float],
    log_level: Optional[str],
    expressions: tuple[str, ...],
) -> None:
    """Resolve EXPRESSIONS (joined with ',') and print one result per line."""
    settings = Settings()
    configure_logging(log_level or settings.LOG_LEVEL, settings.ENVIRONMENT)

    try:
        client = RangeClient(
            list(servers) or settings.SERVERS,
            retry_count=settings.RETRY_COUNT if retry_count is None else retry_count,
            retry_pause=settings.RETRY_PAUSE if retry_pause is None else retry_pause,
            user_agent=settings.USER_AGENT,
            settings=settings,
        )
        values = asyncio.run(_run(client, ",".join(expressions), timeout))
    except RangeClientError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        sys.exit(1)

    for value in values:
        # Bytes, so lines that are not valid UTF-8 are written back unchanged.
        click.echo(value.encode("utf-8", errors="surrogateescape"))


if __name__ == "__main__":
    main()
