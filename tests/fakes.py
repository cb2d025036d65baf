"""Test doubles: in-memory storage gateway, recording SQL executor, recording X-Ray emitter."""

import copy
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from aws_xray_sdk.core.emitters.udp_emitter import UDPEmitter

from taskboard.db.gateway import Between, Contains, In, UpdateResult
from taskboard.errors import ConflictError


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _matches(document, where):
    for field, condition in (where or {}).items():
        value = document.get(field)
        if condition is None:
            if value is not None:
                return False
        elif isinstance(condition, Contains):
            if value is None or condition.substring.lower() not in value.lower():
                return False
        elif isinstance(condition, Between):
            if value is None or not (condition.lower <= value < condition.upper):
                return False
        elif isinstance(condition, In):
            if value not in condition.values:
                return False
        elif value != condition:
            return False
    return True


class InMemoryCollection:
    """Mimics the PostgreSQL collection, including the unique index on ``name``.

    As in PostgreSQL, ``modified_count`` equals ``matched_count``.
    """

    def __init__(self, label):
        self.label = label
        self.documents = []

    def _check_unique(self, name, exclude_id=None):
        if name is None:
            return
        for doc in self.documents:
            if doc.get("name") == name and doc["id"] != exclude_id:
                raise ConflictError(f'A {self.label} with the name "{name}" already exists.')

    async def find(self, where=None, order_by=None, descending=False):
        found = [dict(doc) for doc in self.documents if _matches(doc, where)]
        if order_by:
            # PostgreSQL puts NULLs last for ASC and first for DESC
            found.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by) or 0), reverse=descending)
        return found

    async def find_one(self, where):
        for doc in self.documents:
            if _matches(doc, where):
                return dict(doc)
        return None

    async def insert_one(self, document):
        self._check_unique(document.get("name"))
        new_id = uuid.uuid4()
        self.documents.append({"id": new_id, **document})
        return new_id

    def _apply(self, doc, set_fields, unset_fields):
        if set_fields and "name" in set_fields:
            self._check_unique(set_fields["name"], exclude_id=doc["id"])
        doc.update(set_fields or {})
        for field in unset_fields:
            doc[field] = None

    async def update_one(self, where, set_fields=None, unset_fields=()):
        for doc in self.documents:
            if _matches(doc, where):
                self._apply(doc, set_fields, unset_fields)
                return UpdateResult(matched_count=1, modified_count=1)
        return UpdateResult(matched_count=0, modified_count=0)

    async def update_many(self, where, set_fields=None, unset_fields=()):
        targets = [doc for doc in self.documents if _matches(doc, where)]
        for doc in targets:
            self._apply(doc, set_fields, unset_fields)
        return UpdateResult(matched_count=len(targets), modified_count=len(targets))

    async def delete_one(self, where):
        for index, doc in enumerate(self.documents):
            if _matches(doc, where):
                del self.documents[index]
                return 1
        return 0


class InMemoryDatabase:
    def __init__(self):
        self._tasks = InMemoryCollection("task")
        self._projects = InMemoryCollection("project")
        self.transactions = 0
        self.healthy = True

    @property
    def tasks(self):
        return self._tasks

    @property
    def projects(self):
        return self._projects

    @asynccontextmanager
    async def transaction(self):
        # Snapshot both collections so a failure inside the block rolls back.
        snapshot = (copy.deepcopy(self._tasks.documents), copy.deepcopy(self._projects.documents))
        self.transactions += 1
        try:
            yield self
        except Exception:
            self._tasks.documents, self._projects.documents = snapshot
            raise

    async def ping(self):
        if not self.healthy:
            raise ConnectionError("connection refused")


class RecordingExecutor:
    """Stands in for an asyncpg pool/connection and records every query."""

    def __init__(self, fetch=None, fetchrow=None, fetchval=None, execute="UPDATE 1", error=None):
        self.calls = []
        self.results = {"fetch": fetch or [], "fetchrow": fetchrow, "fetchval": fetchval, "execute": execute}
        self.error = error
        self.transactions = 0

    async def _record(self, method, query, *args):
        self.calls.append((method, query, args))
        if self.error is not None:
            raise self.error
        return self.results[method]

    async def fetch(self, query, *args):
        return await self._record("fetch", query, *args)

    async def fetchrow(self, query, *args):
        return await self._record("fetchrow", query, *args)

    async def fetchval(self, query, *args):
        return await self._record("fetchval", query, *args)

    async def execute(self, query, *args):
        return await self._record("execute", query, *args)

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield


class RecordingEmitter(UDPEmitter):
    """Keeps finished X-Ray segments in memory instead of sending them to the daemon."""

    def __init__(self):
        super().__init__()
        self.segments = []

    def send_entity(self, entity):
        self.segments.append(entity)
