"""
ストレージゲートウェイ定義

目的・理由:
- リポジトリ層からストレージの実装（PostgreSQL）を切り離す
- コレクション単位のfind/insert/update/deleteだけを公開する
- 検索条件は小さなフィルター言語（等価、部分一致、範囲、IN）で表現する

影響範囲:
- タスク・プロジェクトリポジトリ
- PostgreSQL実装（db.postgres）、テスト用インメモリ実装

前提条件・制約:
- ドキュメントのキーはsnake_caseのフィールド名
- 識別子はストレージ側で採番される
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncContextManager, Mapping, Optional, Protocol, Sequence
from uuid import UUID


Document = dict[str, Any]


@dataclass(frozen=True)
class Contains:
    """大文字小文字を区別しない部分一致"""
    substring: str


@dataclass(frozen=True)
class Between:
    """半開区間 [lower, upper) の範囲条件"""
    lower: datetime
    upper: datetime


@dataclass(frozen=True)
class In:
    """値リストのいずれかに一致"""
    values: tuple


@dataclass(frozen=True)
class UpdateResult:
    """
    更新結果

    matched_count: 条件に一致した件数
    modified_count: 実際に更新された件数
    """
    matched_count: int
    modified_count: int


Where = Mapping[str, Any]


class Collection(Protocol):
    """コレクション操作インターフェース"""

    async def find(
        self,
        where: Optional[Where] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Document]: ...

    async def find_one(self, where: Where) -> Optional[Document]: ...

    async def insert_one(self, document: Document) -> UUID: ...

    async def update_one(
        self,
        where: Where,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> UpdateResult: ...

    async def update_many(
        self,
        where: Where,
        set_fields: Optional[Document] = None,
        unset_fields: Sequence[str] = (),
    ) -> UpdateResult: ...

    async def delete_one(self, where: Where) -> int: ...


class Database(Protocol):
    """
    データベースインターフェース

    目的・理由:
    - tasks/projectsコレクションへのアクセスを提供
    - 複数操作を1トランザクションにまとめるtransaction()を提供
    """

    @property
    def tasks(self) -> Collection: ...

    @property
    def projects(self) -> Collection: ...

    def transaction(self) -> AsyncContextManager["Database"]: ...

    async def ping(self) -> None: ...
