"""
リポジトリ共通処理

目的・理由:
- ソート項目（APIのcamelCase名）をストレージのフィールド名に変換
- 「指定日」の範囲（UTCの0時〜翌0時）を算出
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Mapping, Union

from taskboard.errors import InvalidArgumentError
from taskboard.models.common import SortOrder


def resolve_sort(
    field: str,
    order: Union[SortOrder, str],
    sortable: Mapping[str, str],
) -> tuple[str, bool]:
    """
    ソート指定の検証

    目的・理由:
    - 未定義のソート項目は無視せずInvalidArgumentErrorとする
    - camelCase（startDate）とsnake_case（start_date）の両方を受け付ける

    前提条件・制約:
    - 戻り値は（ストレージのフィールド名, 降順かどうか）
    """
    if field in sortable:
        column = sortable[field]
    elif field in sortable.values():
        column = field
    else:
        allowed = ", ".join(sortable)
        raise InvalidArgumentError(f"Invalid sort field: {field}. Allowed fields: {allowed}")

    try:
        direction = SortOrder(order)
    except ValueError:
        raise InvalidArgumentError(f"Invalid sort order: {order}") from None

    return column, direction is SortOrder.DESC


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)
