"""
期限レポート

目的・理由:
- 本日期限のタスクを持つプロジェクト一覧を出力
- 本日終了のプロジェクトに属するタスク一覧を出力

前提条件・制約:
- 実行: python -m taskboard.reports [--date YYYY-MM-DD]
- 日付はUTCで判定する
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime, timezone
from typing import Optional

from aws_xray_sdk.core import xray_recorder

from taskboard.config import Settings
from taskboard.db.gateway import Database
from taskboard.db.postgres import PostgresDatabase, connect, disconnect
from taskboard.log import configure_logging
from taskboard.middleware.xray import bind_async_context, configure_xray
from taskboard.repositories import ProjectRepository, TaskRepository


logger = logging.getLogger(__name__)


async def build_report(db: Database, day: date) -> dict:
    """指定日のレポートを組み立てる（JSON変換可能な辞書）"""
    projects = await ProjectRepository(db).list_projects_with_tasks_due_on(day)
    tasks = await TaskRepository(db).list_tasks_with_projects_ending_on(day)

    return {
        "date": day.isoformat(),
        "projectsWithTasksDue": [p.model_dump(mode="json", by_alias=True) for p in projects],
        "tasksWithProjectsEnding": [t.model_dump(mode="json", by_alias=True) for t in tasks],
    }


async def run(settings: Settings, day: date) -> dict:
    """
    レポート実行（接続からクローズまで）

    前提条件・制約:
    - 実行全体を1つのX-Rayセグメントとし、クエリのサブセグメントをその配下に置く
    """
    bind_async_context(asyncio.get_running_loop())
    segment = xray_recorder.begin_segment(name="taskboard-report", sampling=1)
    segment.put_annotation("report_date", day.isoformat())

    try:
        pool = await connect(settings)
        try:
            return await build_report(PostgresDatabase(pool), day)
        finally:
            await disconnect(pool)
    finally:
        xray_recorder.end_segment()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Taskboard due-date report")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=datetime.now(timezone.utc).date(),
        help="対象日（YYYY-MM-DD、省略時は本日）",
    )
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings)
    configure_xray(settings)

    try:
        report = asyncio.run(run(settings, args.date))
    except Exception:
        logger.exception("Report failed")
        return 1

    logger.info(
        "Report %s: %d project(s) with tasks due, %d task(s) with projects ending",
        report["date"],
        len(report["projectsWithTasksDue"]),
        len(report["tasksWithProjectsEnding"]),
    )
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
