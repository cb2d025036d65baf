"""
モデル共通定義

目的・理由:
- APIのJSONはcamelCase、Python側はsnake_caseで扱う
- 日時はすべてUTCのタイムゾーン付きdatetimeに正規化する
- 識別子（UUID）の形式チェックを1か所にまとめる

影響範囲:
- タスク・プロジェクトのすべてのモデル、リポジトリ層
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from taskboard.errors import InvalidArgumentError


def ensure_utc(value: datetime) -> datetime:
    """タイムゾーンなしの日時はUTCとして扱う"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(value: Any, label: str) -> UUID:
    """
    識別子の形式チェック

    目的・理由:
    - 不正な形式のIDはストレージへ問い合わせる前にInvalidArgumentErrorとする

    前提条件・制約:
    - labelはエラーメッセージ用（"Task" / "Project"）
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {label} ID") from None


class SortOrder(str, Enum):
    """ソート順"""

    ASC = "asc"
    DESC = "desc"


class CamelModel(BaseModel):
    """camelCaseのJSONとsnake_caseの属性を相互変換する基底モデル"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatchModel(CamelModel):
    """部分更新リクエストの基底モデル"""

    def to_patch(self) -> dict:
        """
        指定されたフィールドのみを返す

        目的・理由:
        - 未指定（またはnull）のフィールドは更新対象から除外し、保存値を維持する
        """
        return self.model_dump(exclude_unset=True, exclude_none=True)
