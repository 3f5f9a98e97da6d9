"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
Gemini API キー、使用モデル、テーマ、ログ出力先は
すべてこのクラスを通じて取得する。

本ファイルは app.py と tools/generate_quiz.py の共通設定でもある。

config.toml の例:

    [app]
    name = "Quiz Master"
    theme = "light"

    [gemini]
    model = "gemini-2.5-flash"

    [logging]
    level = "INFO"
    file = "logs/quiz_master.log"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"
ENV_PATH = ROOT_DIR / ".env"

DEFAULT_MODEL = "gemini-2.5-flash"
THEME_KEYS = ("light", "dark", "blue")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - APIキーの読み取り（環境変数 → .env）
    - 使用する Gemini モデル名
    - UI テーマ
    - ログレベル / ログファイル
    """

    # ---------- API ----------
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL

    # ---------- 表示 ----------
    app_name: str = "Quiz Master"
    theme: str = "light"

    # ---------- ログ ----------
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # ============================================================
    # 生成
    # ============================================================

    @classmethod
    def load(
        cls,
        config_path: Path = CONFIG_PATH,
        env_path: Path = ENV_PATH,
    ) -> "AppConfig":
        """
        config.toml と環境変数から設定を組み立てる。
        config.toml が無い・壊れている場合は既定値で動く。
        """
        cfg = cls()
        data = read_toml(config_path)

        app = _section(data, "app")
        name = app.get("name")
        if isinstance(name, str) and name:
            cfg.app_name = name
        theme = app.get("theme")
        if theme in THEME_KEYS:
            cfg.theme = theme

        gemini = _section(data, "gemini")
        model = gemini.get("model")
        if isinstance(model, str) and model:
            cfg.gemini_model = model

        log = _section(data, "logging")
        level = log.get("level")
        if isinstance(level, str) and level.upper() in LOG_LEVELS:
            cfg.log_level = level.upper()
        log_file = log.get("file")
        if isinstance(log_file, str) and log_file:
            path = Path(log_file)
            cfg.log_file = path if path.is_absolute() else config_path.parent / path

        cfg.gemini_api_key = load_api_key(env_path)
        return cfg


# ============================================================
# 内部関数
# ============================================================

def load_api_key(env_path: Path = ENV_PATH) -> str:
    """
    環境変数 GEMINI_API_KEY を優先し、
    無ければローカル開発用の .env から読む。
    """
    key = os.environ.get("GEMINI_API_KEY")
    if key:
        return key

    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            if line.startswith("GEMINI_API_KEY="):
                return line.split("=", 1)[1].strip()

    return ""


def read_toml(path: Path) -> Dict[str, Any]:
    """config.toml を読む。存在しない・解析できない場合は空 dict。"""
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except toml.TomlDecodeError as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


# ============================================================
# ログ設定
# ============================================================

def configure_logging(config: AppConfig) -> None:
    """
    ルートロガーを設定する。標準エラーへの出力に加え、
    log_file があればファイルにも書き出す。
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
