"""Interactive operator console for the sponsor ledger.

Runs as the server console: it holds every admin flag but has no player
session, so private tiers cannot be granted from here.
"""
import asyncio
import logging
import sys
from typing import Callable, Optional, Set

from dotenv import load_dotenv

from backend import app_context
from backend.app.services.sponsors import build_account_resolver, build_sponsor_service
from backend.app.sponsors import ActorContext
from backend.app.sponsors.commands import CommandOutput, SponsorCommandDispatcher, help_lines
from backend.app.sponsors.config import SponsorConfig, load_sponsor_config
from backend.app.sponsors.repository import create_sponsor_pool

logger = logging.getLogger("sponsors.console")

PROMPT = "> "


def print_output(output: CommandOutput) -> None:
    for line in output.errors:
        print(f"error: {line}", file=sys.stderr)
    for line in output.lines:
        print(line)


async def run_command(dispatcher: SponsorCommandDispatcher, line: str, actor: ActorContext) -> None:
    output = await dispatcher.execute(line, actor)
    print_output(output)


async def run_console(config: SponsorConfig) -> None:
    pool = None
    if config.store_backend == "postgres":
        pool = await create_sponsor_pool(
            config.db_config,
            min_size=config.pool_min_size,
            max_size=config.pool_max_size,
            command_timeout=config.command_timeout,
            connect_timeout=config.db_connect_timeout,
        )

    logger.info("Sponsor console started with the %s store", config.store_backend)
    actor = ActorContext.console()
    app_context.configure(
        get_pool=lambda: pool,
        get_current_actor=lambda **_: actor,
        sponsor_config=config,
    )
    dispatcher = SponsorCommandDispatcher(build_sponsor_service(config), build_account_resolver(config))

    print("Sponsor ledger console (type 'help' for commands, 'quit' to leave)")
    try:
        await serve_commands(dispatcher, actor)
    finally:
        app_context.reset()
        if pool is not None:
            await pool.close()


async def serve_commands(
    dispatcher: SponsorCommandDispatcher,
    actor: ActorContext,
    *,
    read_line: Optional[Callable[[], Optional[str]]] = None,
) -> None:
    """Read commands until quit or EOF, then wait for the ones still running."""

    read_line = read_line or _read_line
    loop = asyncio.get_running_loop()
    pending: Set[asyncio.Task] = set()

    def _finished(task: asyncio.Task) -> None:
        pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Console command failed", exc_info=exc)

    while True:
        line = await loop.run_in_executor(None, read_line)
        if line is None or line.strip().lower() in {"quit", "exit"}:
            break
        if not line.strip():
            continue
        # Commands run concurrently with the prompt.
        task = asyncio.create_task(run_command(dispatcher, line, actor))
        pending.add(task)
        task.add_done_callback(_finished)
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def _read_line() -> Optional[str]:
    try:
        return input(PROMPT)
    except EOFError:
        return None


def main() -> None:
    load_dotenv()
    config = load_sponsor_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if len(sys.argv) > 1 and sys.argv[1] in {"-h", "--help"}:
        for line in help_lines():
            print(line)
        return
    asyncio.run(run_console(config))


if __name__ == "__main__":
    main()
