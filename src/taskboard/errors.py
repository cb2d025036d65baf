"""
ドメインエラー定義

目的・理由:
- リポジトリ層の失敗を種類ごとのクラスで表現する
- API層はメッセージ文字列ではなくクラス（code）でHTTPステータスを決定する

影響範囲:
- リポジトリ層、ストレージゲートウェイ、API例外ハンドラー
"""


class TaskboardError(Exception):
    """すべてのドメインエラーの基底クラス"""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(TaskboardError):
    """不正な識別子・ソート項目など、呼び出し側で修正すべき入力"""

    code = "INVALID_ARGUMENT"


class NotFoundError(TaskboardError):
    """参照先のエンティティが存在しない"""

    code = "NOT_FOUND"


class ConflictError(TaskboardError):
    """一意制約（名前）の重複"""

    code = "CONFLICT"
