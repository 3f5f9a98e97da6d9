"""
quiz_master パッケージ
======================

このパッケージは、AI 生成トリビアクイズアプリ Quiz Master の内部ロジックを提供する。

主な役割:
- 設定管理・ログ設定（config）
- データモデル・問題取得の口（models）
- Gemini による問題生成と応答の検証（provider）
- クイズ進行の状態遷移とスコア計算（controller）
- UI コンポーネント（ui）

provider / ui は Gemini SDK・Streamlit を読み込むため、ここでは import しない。
app.py は Streamlit の画面切替のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
"""

from .config import AppConfig, configure_logging
from .models import (
    QuestionGenerationFailed,
    QuestionProvider,
    QuizQuestion,
    QuizSession,
    Screen,
    UserAnswer,
)
from .controller import OptionHighlight

__all__ = [
    "AppConfig",
    "configure_logging",
    "QuestionGenerationFailed",
    "QuestionProvider",
    "QuizQuestion",
    "QuizSession",
    "Screen",
    "UserAnswer",
    "OptionHighlight",
]
