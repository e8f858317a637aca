"""Test doubles shared across the suite."""

from __future__ import annotations

from redis.exceptions import ConnectionError as RedisConnectionError


class FakeRedis:
    """Dictionary-backed stand-in for the subset of ``redis.Redis`` the store uses.

    Values are stored as strings, as with ``decode_responses=True``. Set
    ``fail = True`` to make every command raise a connection error, or add
    command names to ``fail_on`` to fail only those.
    """

    def __init__(self):
        self.strings: dict[str, str | bytes] = {}
        self.sets: dict[str, set[str]] = {}
        self.fail = False
        self.fail_on: set[str] = set()
        self.closed = False

    def _check(self, command: str) -> None:
        if self.fail or command in self.fail_on:
            raise RedisConnectionError("Connection refused")

    def set(self, key, value, nx=False, xx=False):
        self._check("set")
        if nx and key in self.strings:
            return None
        if xx and key not in self.strings:
            return None
        self.strings[key] = value
        return True

    def get(self, key):
        self._check("get")
        return self.strings.get(key)

    def getdel(self, key):
        self._check("getdel")
        return self.strings.pop(key, None)

    def delete(self, *keys):
        self._check("delete")
        return sum(1 for key in keys if self.strings.pop(key, None) is not None)

    def mget(self, keys):
        self._check("mget")
        return [self.strings.get(key) for key in keys]

    def exists(self, *keys):
        self._check("exists")
        return sum(1 for key in keys if key in self.strings)

    def sadd(self, key, *members):
        self._check("sadd")
        bucket = self.sets.setdefault(key, set())
        added = len(set(members) - bucket)
        bucket.update(members)
        return added

    def srem(self, key, *members):
        self._check("srem")
        bucket = self.sets.get(key, set())
        removed = len(bucket & set(members))
        bucket.difference_update(members)
        if not bucket:
            self.sets.pop(key, None)
        return removed

    def smembers(self, key):
        self._check("smembers")
        return set(self.sets.get(key, set()))

    def ping(self):
        self._check("ping")
        return True

    def close(self):
        self.closed = True

    def pipeline(self, transaction=True):
        return FakePipeline(self)


class FakePipeline:
    """Queues commands and applies them on ``execute``.

    Like MULTI/EXEC, a failure of any queued command aborts the whole batch
    before anything is applied.
    """

    def __init__(self, client: FakeRedis):
        self._client = client
        self._commands = []

    def __getattr__(self, name):
        command = getattr(self._client, name)

        def queue(*args, **kwargs):
            self._commands.append((name, command, args, kwargs))
            return self

        return queue

    def execute(self):
        self._client._check("exec")
        for name, _, _, _ in self._commands:
            self._client._check(name)
        results = [command(*args, **kwargs) for _, command, args, kwargs in self._commands]
        self._commands = []
        return results
