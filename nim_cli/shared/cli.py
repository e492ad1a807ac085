"""Shared CLI helpers and decorators."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import click

from .config import AppConfig, load_config
from .exceptions import ConfigurationError, NimAgentError, TransactionSourceError
from .logging import Logger, get_logger

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class CLIContext:
    """Resolved config and logger for one CLI invocation."""

    config: AppConfig
    verbose: bool
    logger: Logger


def common_cli_options(func: F) -> F:
    """Add ``--config/--seed/--verbose`` and pass a ``cli_ctx`` keyword to the command."""

    @click.option("--config", "config_path", type=click.Path(path_type=str), help="Path to config file.")
    @click.option("--seed", type=int, help="Seed for mock data generation (overrides config).")
    @click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
    @click.pass_context
    @functools.wraps(func)
    def wrapper(
        ctx: click.Context,
        *args: Any,
        config_path: str | None = None,
        seed: int | None = None,
        verbose: bool = False,
        **kwargs: Any,
    ) -> Any:
        try:
            app_config = load_config(config_path)
        except ConfigurationError as exc:
            raise click.ClickException(str(exc)) from exc
        if seed is not None:
            app_config = app_config.with_mock(seed=seed)

        logger = get_logger(verbose=verbose)
        logger.debug(f"Loaded configuration from {app_config.source_path}")

        ctx.obj = kwargs["cli_ctx"] = CLIContext(config=app_config, verbose=verbose, logger=logger)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def handle_cli_errors(func: F) -> F:
    """Convert project exceptions into Click-friendly errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigurationError as exc:
            raise click.ClickException(f"Configuration error: {exc}") from exc
        except TransactionSourceError as exc:
            raise click.ClickException(f"Invalid transaction input: {exc}") from exc
        except NimAgentError as exc:
            raise click.ClickException(str(exc)) from exc
        except click.ClickException:
            raise
        except Exception as exc:  # pragma: no cover
            raise click.ClickException(f"Unexpected error: {exc}") from exc

    return wrapper  # type: ignore[return-value]
