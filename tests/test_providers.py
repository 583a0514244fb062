"""Tests for completion data providers"""

import asyncio
import logging
import threading

import pytest

from tab_complete.providers import (
    AsyncProvider,
    CallbackProvider,
    StaticProvider,
    SyncProvider,
    fetch_candidates,
    make_provider,
    resolve_callable,
)


def sync_source(text):
    return [text + "1", text + "2"]


def callback_source(text, deliver):
    deliver([text + "-cb"])


async def async_source(text):
    return [text + "-async"]


async def async_callback_source(text, deliver):
    return [text + "-returned"]


class TestMakeProvider:
    """Tests for provider classification"""

    def test_none(self):
        """Test that no configuration gives no provider"""
        assert make_provider(None) is None

    def test_list(self):
        """Test that a list becomes a static provider"""
        provider = make_provider(["a", "b"])
        assert isinstance(provider, StaticProvider)
        assert provider.data == ("a", "b")

    def test_tuple_and_set(self):
        """Test that tuples and sets become static providers, sets in order"""
        assert make_provider(("a",)) == StaticProvider(["a"])
        assert make_provider({"b", "a"}) == StaticProvider(["a", "b"])

    def test_data_mapping(self):
        """Test that a data mapping is unwrapped"""
        assert make_provider({"data": ["x"]}) == StaticProvider(["x"])

    def test_existing_provider_is_kept(self):
        """Test that a ready provider is passed through"""
        provider = StaticProvider(["x"])
        assert make_provider(provider) is provider

    def test_sync_function(self):
        """Test that a one-argument function becomes a sync provider"""
        assert isinstance(make_provider(sync_source), SyncProvider)

    def test_callback_function(self):
        """Test that a two-argument function becomes a callback provider"""
        assert isinstance(make_provider(callback_source), CallbackProvider)

    def test_async_function(self):
        """Test that a one-argument coroutine function becomes an async provider"""
        assert isinstance(make_provider(async_source), AsyncProvider)

    def test_async_function_taking_deliver(self):
        """Test that a coroutine function taking deliver becomes a callback provider"""
        assert isinstance(make_provider(async_callback_source), CallbackProvider)

    def test_varargs_function_is_sync(self):
        """Test that a *args function is treated as taking only the text"""
        assert isinstance(make_provider(lambda *args: []), SyncProvider)

    def test_callable_reference(self):
        """Test that a module:attr string is imported"""
        provider = make_provider("os.path:basename")
        assert isinstance(provider, SyncProvider)

    def test_callable_mapping(self):
        """Test that a callable mapping is imported and classified"""
        assert isinstance(make_provider({"callable": "tests.test_providers:callback_source"}), CallbackProvider)

    def test_unsupported_mapping(self):
        """Test that an unknown mapping is rejected"""
        with pytest.raises(ValueError, match="Unsupported autocomplete mapping"):
            make_provider({"foo": 1})

    def test_unsupported_value(self):
        """Test that a value of no known shape is rejected"""
        with pytest.raises(ValueError, match="Unsupported autocomplete provider"):
            make_provider(42)


class TestResolveCallable:
    """Tests for module:attribute references"""

    def test_nested_attribute(self):
        """Test that dotted attribute paths are followed"""
        import os.path

        assert resolve_callable("os:path.basename") is os.path.basename

    def test_missing_colon(self):
        """Test that a reference without a colon is rejected"""
        with pytest.raises(ValueError, match="module:attribute"):
            resolve_callable("os.path.basename")

    def test_missing_module(self):
        """Test that an unimportable module is reported"""
        with pytest.raises(ValueError, match="Cannot import provider"):
            resolve_callable("no_such_module_xyz:func")

    def test_not_callable(self):
        """Test that a non-callable attribute is rejected"""
        with pytest.raises(ValueError, match="not callable"):
            resolve_callable("os:sep")


class TestFetch:
    """Tests for fetching candidates"""

    @pytest.mark.asyncio
    async def test_static(self):
        """Test that a static provider returns its data"""
        assert await StaticProvider(["a", "b"]).fetch("x") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_sync(self):
        """Test that a sync provider is called with the text"""
        assert await SyncProvider(sync_source).fetch("v") == ["v1", "v2"]

    @pytest.mark.asyncio
    async def test_sync_returning_none(self):
        """Test that a None result means no candidates"""
        assert await SyncProvider(lambda text: None).fetch("v") == []

    @pytest.mark.asyncio
    async def test_sync_returning_awaitable(self):
        """Test that an awaitable result is awaited"""
        assert await SyncProvider(lambda text: async_source(text)).fetch("v") == ["v-async"]

    @pytest.mark.asyncio
    async def test_items_become_strings(self):
        """Test that non-string items are converted"""
        assert await SyncProvider(lambda text: [1, 2]).fetch("") == ["1", "2"]

    @pytest.mark.asyncio
    async def test_callback(self):
        """Test that delivered candidates are returned"""
        assert await CallbackProvider(callback_source).fetch("v") == ["v-cb"]

    @pytest.mark.asyncio
    async def test_callback_return_value_ignored(self):
        """Test that a plain function's return value is ignored in favour of the delivery"""
        def source(text, deliver):
            deliver(["delivered"])
            return ["returned"]

        assert await CallbackProvider(source).fetch("") == ["delivered"]

    @pytest.mark.asyncio
    async def test_callback_from_thread(self):
        """Test that a delivery from another thread is picked up"""
        def source(text, deliver):
            threading.Thread(target=deliver, args=(["threaded"],)).start()

        assert await asyncio.wait_for(CallbackProvider(source).fetch(""), timeout=5) == ["threaded"]

    @pytest.mark.asyncio
    async def test_callback_only_first_delivery_counts(self):
        """Test that later deliveries are ignored"""
        def source(text, deliver):
            deliver(["first"])
            deliver(["second"])

        assert await CallbackProvider(source).fetch("") == ["first"]

    @pytest.mark.asyncio
    async def test_callback_delivering_nothing(self):
        """Test that an empty delivery means no candidates"""
        assert await CallbackProvider(lambda text, deliver: deliver()).fetch("") == []

    @pytest.mark.asyncio
    async def test_async_callback_returning(self):
        """Test that a coroutine taking deliver may return its candidates"""
        assert await make_provider(async_callback_source).fetch("al") == ["al-returned"]

    @pytest.mark.asyncio
    async def test_async_callback_delivering(self):
        """Test that a coroutine taking deliver may deliver and return nothing"""
        async def source(text, deliver):
            await asyncio.sleep(0)
            deliver(["delivered"])

        assert await asyncio.wait_for(make_provider(source).fetch(""), timeout=5) == ["delivered"]

    @pytest.mark.asyncio
    async def test_async_callback_delivery_before_return(self):
        """Test that an early delivery wins over a slow return value"""
        async def source(text, deliver):
            deliver(["delivered"])
            await asyncio.sleep(1)
            return ["returned"]

        assert await asyncio.wait_for(make_provider(source).fetch(""), timeout=5) == ["delivered"]

    @pytest.mark.asyncio
    async def test_async(self):
        """Test that an async provider is awaited"""
        assert await AsyncProvider(async_source).fetch("v") == ["v-async"]


class TestFetchCandidates:
    """Tests for failure handling"""

    @pytest.mark.asyncio
    async def test_no_provider(self):
        """Test that a missing provider gives no candidates"""
        assert await fetch_candidates(None, "x") == []

    @pytest.mark.asyncio
    async def test_async_failure_gives_no_candidates(self, caplog):
        """Test that a failing coroutine is logged and gives no candidates"""
        async def failing(text):
            raise RuntimeError("backend down")

        with caplog.at_level(logging.WARNING):
            assert await fetch_candidates(make_provider(failing), "x") == []
        assert "failed" in caplog.text

    @pytest.mark.asyncio
    async def test_sync_failure_gives_no_candidates(self):
        """Test that a raising function gives no candidates"""
        def failing(text):
            raise KeyError(text)

        assert await fetch_candidates(make_provider(failing), "x") == []

    @pytest.mark.asyncio
    async def test_callback_failure_gives_no_candidates(self):
        """Test that a raising callback function gives no candidates"""
        def failing(text, deliver):
            raise ValueError("bad")

        assert await fetch_candidates(make_provider(failing), "x") == []

    @pytest.mark.asyncio
    async def test_async_callback_failure_gives_no_candidates(self):
        """Test that a raising coroutine taking deliver gives no candidates"""
        async def failing(text, deliver):
            raise ValueError("bad")

        assert await fetch_candidates(make_provider(failing), "x") == []
