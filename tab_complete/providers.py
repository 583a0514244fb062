"""Completion data providers

A provider is the source of candidates for a command's arguments or an
option's value. Its shape is decided once, when a command or option is
defined, by `make_provider`:

- a list or tuple becomes a StaticProvider
- a function taking a second ``deliver`` argument becomes a CallbackProvider
- any other ``async def`` function becomes an AsyncProvider
- any other callable becomes a SyncProvider
"""

import asyncio
import importlib
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Deliver = Callable[[Any], None]


def _as_candidates(data: Any) -> list[str]:
    """Normalize provider output to a list of strings"""
    if data is None:
        return []
    if isinstance(data, str):
        return [data]
    return [str(item) for item in data]


class DataProvider:
    """Base class of the provider variants"""

    async def fetch(self, text: str) -> list[str]:
        raise NotImplementedError


class StaticProvider(DataProvider):
    """A fixed list of candidates"""

    def __init__(self, data):
        self.data = tuple(str(item) for item in data)

    def __repr__(self):
        return f"StaticProvider({list(self.data)!r})"

    def __eq__(self, other):
        return isinstance(other, StaticProvider) and other.data == self.data

    async def fetch(self, text: str) -> list[str]:
        return list(self.data)


class FunctionProvider(DataProvider):
    """Common base of the providers wrapping a function"""

    def __init__(self, func: Callable):
        self.func = func

    def __repr__(self):
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"{type(self).__name__}({name})"


class SyncProvider(FunctionProvider):
    """A plain function returning candidates for the current text"""

    async def fetch(self, text: str) -> list[str]:
        result = self.func(text)
        if inspect.isawaitable(result):
            result = await result
        return _as_candidates(result)


class CallbackProvider(FunctionProvider):
    """A function that hands its candidates to a ``deliver`` callback

    Only the first delivery counts. `deliver` may be called from another
    thread; there is no timeout, so a provider that never delivers stalls
    the request. An ``async def`` provider may instead return its
    candidates, and whichever of the delivery or the return value comes
    first is used.
    """

    async def fetch(self, text: str) -> list[str]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _set(data: Any):
            if future.done():
                logger.debug("Ignoring extra delivery from %r", self)
                return
            future.set_result(data)

        def deliver(data: Any = None):
            loop.call_soon_threadsafe(_set, data)

        result = self.func(text, deliver)
        if inspect.isawaitable(result):
            returned = asyncio.ensure_future(result)
            try:
                await asyncio.wait({returned, future}, return_when=asyncio.FIRST_COMPLETED)
                if not future.done() and returned.result() is not None:
                    return _as_candidates(returned.result())
            finally:
                if not returned.done():
                    returned.cancel()
        return _as_candidates(await future)


class AsyncProvider(FunctionProvider):
    """A coroutine function resolving to candidates"""

    async def fetch(self, text: str) -> list[str]:
        return _as_candidates(await self.func(text))


def _positional_arity(func: Callable) -> int:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 1

    count = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return 1
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def make_provider(config: Any) -> DataProvider | None:
    """Build the provider matching the shape of `config`

    Args:
        config: A provider, a list of candidates, a callable, a
            ``{"data": ...}`` mapping or a ``"module:attr"`` reference

    Returns:
        The provider, or None when `config` is None

    Raises:
        ValueError: If `config` has no usable shape
    """
    if config is None or isinstance(config, DataProvider):
        return config
    if isinstance(config, dict):
        if "data" in config:
            return make_provider(config["data"])
        if "callable" in config:
            return make_provider(resolve_callable(config["callable"]))
        raise ValueError(f"Unsupported autocomplete mapping: {sorted(config)}")
    if isinstance(config, str):
        return make_provider(resolve_callable(config))
    if isinstance(config, list | tuple | set | frozenset):
        data = sorted(config) if isinstance(config, set | frozenset) else config
        return StaticProvider(data)
    if callable(config):
        if _positional_arity(config) >= 2:
            return CallbackProvider(config)
        if inspect.iscoroutinefunction(config):
            return AsyncProvider(config)
        return SyncProvider(config)
    raise ValueError(f"Unsupported autocomplete provider: {config!r}")


def resolve_callable(reference: str) -> Callable:
    """Import a callable from a ``"package.module:attribute"`` reference

    Raises:
        ValueError: If the reference is malformed or cannot be imported
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Provider reference must be 'module:attribute', got '{reference}'")

    try:
        target: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot import provider '{reference}': {e}") from e

    if not callable(target):
        raise ValueError(f"Provider '{reference}' is not callable")
    return target


async def fetch_candidates(provider: DataProvider | None, text: str) -> list[str]:
    """Fetch candidates from a provider, treating failures as no candidates"""
    if provider is None:
        return []
    try:
        return await provider.fetch(text)
    except Exception:
        logger.warning("Autocomplete provider %r failed for %r", provider, text, exc_info=True)
        return []
