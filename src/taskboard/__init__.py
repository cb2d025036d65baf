"""タスク・プロジェクト管理API"""

__version__ = "1.0.0"
