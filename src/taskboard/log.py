"""
ログ設定

目的・理由:
- アプリケーション全体のログ形式を統一する
- コンソール出力に加え、LOG_FILE指定時はファイルにも出力する

影響範囲:
- taskboardロガー配下のすべてのログ
"""

import logging
import os

from taskboard.config import Settings


LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings) -> logging.Logger:
    """
    taskboardロガーの初期化

    前提条件・制約:
    - 複数回呼ばれてもハンドラーを重複登録しない
    """
    logger = logging.getLogger("taskboard")
    logger.setLevel(settings.log_level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.log_file:
        directory = os.path.dirname(settings.log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
