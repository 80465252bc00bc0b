"""Testing contracts – SimpleCacheContract."""
from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from types import SimpleNamespace
from typing import Any

import pytest

from cachepool.application.pool import CachePool
from cachepool.application.simple import SimpleCache
from cachepool.kernel.errors import InvalidKeyError
from cachepool.kernel.time import FrozenClock
from cachepool.testing.contracts.base import PoolContractBase, reserved_character_keys

INVALID_SIMPLE_KEYS = [
    pytest.param(True, id="bool-true"),
    pytest.param(False, id="bool-false"),
    pytest.param(None, id="none"),
    pytest.param(object(), id="object"),
    pytest.param(["array"], id="list"),
    pytest.param("", id="empty-string"),
    pytest.param(2, id="int"),
    *reserved_character_keys(),
]

VALID_KEYS = ["AbC19_.", "1234567890123456789012345678901234567890123456789012345678901234"]

VALID_DATA = [
    pytest.param("AbC19_.", id="str"),
    pytest.param(4711, id="int"),
    pytest.param(47.11, id="float"),
    pytest.param(True, id="bool"),
    pytest.param(None, id="none"),
    pytest.param({"key": "value"}, id="dict"),
    pytest.param(SimpleNamespace(), id="object"),
]


class SimpleCacheContract(PoolContractBase):
    """Key/value behaviour of :class:`SimpleCache` on top of a pool."""

    def create_simple_cache(self, pool: CachePool) -> SimpleCache:
        return SimpleCache(pool)

    @pytest.fixture
    def cache(self, pool: CachePool) -> SimpleCache:
        return self.create_simple_cache(pool)

    # ------------------------------------------------------------------
    # Single keys
    # ------------------------------------------------------------------

    def test_set(self, cache: SimpleCache) -> None:
        assert cache.set("key", "value") is True
        assert cache.get("key") == "value"

    def test_set_ttl(self, cache: SimpleCache, clock: FrozenClock) -> None:
        assert cache.set("key1", "value", 2) is True
        assert cache.get("key1") == "value"
        cache.set("key2", "value", timedelta(seconds=2))
        assert cache.get("key2") == "value"

        clock.advance(seconds=3)

        assert cache.get("key1") is None
        assert cache.get("key2") is None

    def test_set_expired_ttl(self, cache: SimpleCache) -> None:
        cache.set("key0", "value")
        cache.set("key0", "value", 0)
        assert cache.get("key0") is None
        assert not cache.has("key0")

        cache.set("key1", "value", -1)
        assert cache.get("key1") is None
        assert not cache.has("key1")

    def test_get(self, cache: SimpleCache) -> None:
        assert cache.get("key") is None
        assert cache.get("key", "foo") == "foo"

        cache.set("key", "value")
        assert cache.get("key", "foo") == "value"

    def test_delete(self, cache: SimpleCache) -> None:
        assert cache.delete("key") is True
        cache.set("key", "value")
        assert cache.delete("key") is True
        assert cache.get("key") is None

    def test_clear(self, cache: SimpleCache) -> None:
        assert cache.clear() is True
        cache.set("key", "value")
        assert cache.clear() is True
        assert cache.get("key") is None

    def test_has(self, cache: SimpleCache) -> None:
        assert not cache.has("key0")
        cache.set("key0", "value0")
        assert cache.has("key0")

    def test_basic_usage_with_long_key(self, cache: SimpleCache) -> None:
        key = "a" * 300

        assert not cache.has(key)
        assert cache.set(key, "value") is True
        assert cache.has(key)
        assert cache.get(key) == "value"
        assert cache.delete(key) is True
        assert not cache.has(key)

    def test_null_overwrite(self, cache: SimpleCache) -> None:
        cache.set("key", 5)
        cache.set("key", None)
        assert cache.get("key") is None
        assert cache.has("key")

    # ------------------------------------------------------------------
    # Multiple keys
    # ------------------------------------------------------------------

    def test_set_multiple(self, cache: SimpleCache) -> None:
        assert cache.set_multiple({"key0": "value0", "key1": "value1"}) is True
        assert cache.get("key0") == "value0"
        assert cache.get("key1") == "value1"

    def test_set_multiple_with_numeric_string_key(self, cache: SimpleCache) -> None:
        assert cache.set_multiple({"0": "value0"}) is True
        assert cache.get("0") == "value0"

    def test_set_multiple_ttl(self, cache: SimpleCache, clock: FrozenClock) -> None:
        cache.set_multiple({"key2": "value2", "key3": "value3"}, 2)
        assert cache.get("key2") == "value2"
        assert cache.get("key3") == "value3"
        cache.set_multiple({"key4": "value4"}, timedelta(seconds=2))
        assert cache.get("key4") == "value4"

        clock.advance(seconds=3)

        assert cache.get("key2") is None
        assert cache.get("key3") is None
        assert cache.get("key4") is None

    def test_set_multiple_expired_ttl(self, cache: SimpleCache) -> None:
        cache.set_multiple({"key0": "value0", "key1": "value1"}, 0)
        assert cache.get("key0") is None
        assert cache.get("key1") is None

    def test_set_multiple_with_generator(self, cache: SimpleCache) -> None:
        def pairs() -> Iterator[tuple[str, str]]:
            yield "key0", "value0"
            yield "key1", "value1"

        cache.set_multiple(pairs())
        assert cache.get("key0") == "value0"
        assert cache.get("key1") == "value1"

    def test_get_multiple(self, cache: SimpleCache) -> None:
        assert cache.get_multiple(["key0", "key1"]) == {"key0": None, "key1": None}

        cache.set("key3", "value")
        result = cache.get_multiple(["key2", "key3", "key4"], "foo")
        assert result == {"key2": "foo", "key3": "value", "key4": "foo"}
        assert list(result) == ["key2", "key3", "key4"]

    def test_get_multiple_with_generator(self, cache: SimpleCache) -> None:
        def keys() -> Iterator[str]:
            yield "key0"
            yield "key1"

        cache.set("key0", "value0")
        assert cache.get_multiple(keys()) == {"key0": "value0", "key1": None}

    def test_delete_multiple(self, cache: SimpleCache) -> None:
        assert cache.delete_multiple([]) is True
        assert cache.delete_multiple(["key"]) is True

        cache.set("key0", "value0")
        cache.set("key1", "value1")
        assert cache.delete_multiple(["key0", "key1"]) is True
        assert cache.get("key0") is None
        assert cache.get("key1") is None

    def test_delete_multiple_generator(self, cache: SimpleCache) -> None:
        def keys() -> Iterator[str]:
            yield "key0"
            yield "key1"

        cache.set("key0", "value0")
        assert cache.delete_multiple(keys()) is True
        assert cache.get("key0") is None
        assert cache.get("key1") is None

    # ------------------------------------------------------------------
    # Key validation
    # ------------------------------------------------------------------

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_get_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.get(key)

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_get_multiple_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.get_multiple(["key1", key, "key2"])

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_set_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.set(key, "foobar")

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_set_multiple_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        def pairs() -> Iterator[tuple[Any, str]]:
            yield "key1", "foo"
            yield key, "bar"
            yield "key2", "baz"

        with pytest.raises(InvalidKeyError):
            cache.set_multiple(pairs())
        assert not cache.has("key1")

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_has_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.has(key)

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_delete_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.delete(key)

    @pytest.mark.parametrize("key", INVALID_SIMPLE_KEYS)
    def test_delete_multiple_invalid_keys(self, cache: SimpleCache, key: Any) -> None:
        with pytest.raises(InvalidKeyError):
            cache.delete_multiple(["key1", key, "key2"])

    @pytest.mark.parametrize("key", VALID_KEYS)
    def test_set_valid_keys(self, cache: SimpleCache, key: str) -> None:
        cache.set(key, "foobar")
        assert cache.get(key) == "foobar"

    @pytest.mark.parametrize("key", VALID_KEYS)
    def test_set_multiple_valid_keys(self, cache: SimpleCache, key: str) -> None:
        cache.set_multiple({key: "foobar"})
        assert cache.get_multiple([key]) == {key: "foobar"}

    # ------------------------------------------------------------------
    # Data types
    # ------------------------------------------------------------------

    @pytest.mark.parametrize("data", VALID_DATA)
    def test_set_valid_data(self, cache: SimpleCache, data: Any) -> None:
        cache.set("key", data)
        assert cache.get("key") == data

    @pytest.mark.parametrize("data", VALID_DATA)
    def test_set_multiple_valid_data(self, cache: SimpleCache, data: Any) -> None:
        cache.set_multiple({"key": data})
        assert cache.get_multiple(["key"]) == {"key": data}

    def test_data_type_string(self, cache: SimpleCache) -> None:
        cache.set("key", "5")
        result = cache.get("key")
        assert result == "5"
        assert isinstance(result, str)

    def test_data_type_integer(self, cache: SimpleCache) -> None:
        cache.set("key", 5)
        result = cache.get("key")
        assert result == 5
        assert type(result) is int

    def test_data_type_float(self, cache: SimpleCache) -> None:
        cache.set("key", 1.23456789)
        result = cache.get("key")
        assert isinstance(result, float)
        assert result == 1.23456789

    def test_data_type_boolean(self, cache: SimpleCache) -> None:
        cache.set("key", False)
        assert cache.get("key") is False
        assert cache.has("key")

    def test_data_type_mapping(self, cache: SimpleCache) -> None:
        value = {"a": "foo", 2: "bar"}
        cache.set("key", value)
        assert cache.get("key") == value

    def test_data_type_object(self, cache: SimpleCache) -> None:
        value = SimpleNamespace(a="foo")
        cache.set("key", value)
        assert cache.get("key") == value

    def test_binary_data(self, cache: SimpleCache) -> None:
        data = bytes(range(256))
        cache.set("key", data)
        assert cache.get("key") == data

    def test_object_as_default_value(self, cache: SimpleCache) -> None:
        default = SimpleNamespace(foo="value")
        assert cache.get("key", default) is default

    def test_object_does_not_change_in_cache(self, cache: SimpleCache) -> None:
        value = SimpleNamespace(foo="value")
        cache.set("key", value)
        value.foo = "changed"

        assert cache.get("key").foo == "value"


__all__ = ["INVALID_SIMPLE_KEYS", "SimpleCacheContract", "VALID_DATA", "VALID_KEYS"]
