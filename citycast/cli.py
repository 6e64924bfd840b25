import asyncio
import inspect
import logging
import os
from importlib import import_module
from pathlib import Path

import click
import structlog
import uvicorn


def get_log_level() -> int:
    """
    The level set in CITYCAST_LOG_LEVEL, falling back to INFO if it is unset
    or not a known level name.
    """
    name = os.getenv("CITYCAST_LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(get_log_level()),
)


class AsyncAwareContext(click.Context):
    """
    A click context that invokes async functions with asyncio.run.
    """

    def invoke(self, *args, **kwargs):
        r = super().invoke(*args, **kwargs)
        if inspect.isawaitable(r):
            return asyncio.run(r)
        else:
            return r


click.Command.context_class = AsyncAwareContext


@click.group()
def cli() -> None:
    pass


@cli.command(help="Run the API server")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
def serve(*, host: str, port: int) -> None:
    uvicorn.run("citycast.server:app", host=host, port=port)


def load_apps(path: Path) -> None:
    for cli_module in path.glob("*/cli*.py"):

        # Construct the name of the module
        relative_path = cli_module.relative_to(Path(__file__).parent)
        module_path = ".".join(p.name for p in reversed(relative_path.parents))
        module_name = f"{module_path}.{cli_module.stem}"

        # Register the module
        module = import_module(module_name, package="citycast")
        if command := getattr(module, "cli", None):
            cli.add_command(command)


load_apps(Path(__file__).parent)
