import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from loguru import logger

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T | None:
    """Function to call directly inside the typer cli function"""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("Interrupted, request aborted.")
        return None
