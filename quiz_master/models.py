"""
models.py
======================

クイズで扱うデータモデルをまとめたモジュール。

- QuizQuestion : Gemini が生成した四択問題 1 問（生成後は不変）
- UserAnswer   : 1 問に対するユーザーの解答記録（1 問につき 1 件、不変）
- Screen       : 画面状態（INTRO / LOADING / PLAYING / RESULTS / ERROR）
- QuizSession  : 1 セッション分の状態。遷移は controller.py の純粋関数が
                 新しいインスタンスを返す形で行う。
- QuestionProvider / QuestionGenerationFailed :
                 問題取得の口とその唯一の失敗種別（Gemini 実装は provider.py）
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple


# ----------------------------------------------------------------------
#  問題
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizQuestion:
    """
    四択問題 1 問。

    answer は options のいずれかと完全一致する文字列であること。
    （検証は provider.parse_questions で行う）
    """

    id: str
    question: str
    options: Tuple[str, ...]
    answer: str
    explanation: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuizQuestion":
        """
        Gemini の JSON 1 オブジェクトから生成する。
        フィールド名の変換やデフォルト補完は行わない。
        """
        return cls(
            id=data["id"],
            question=data["question"],
            options=tuple(data["options"]),
            answer=data["answer"],
            explanation=data["explanation"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
            "explanation": self.explanation,
        }


# ----------------------------------------------------------------------
#  解答記録
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class UserAnswer:
    """確定済みの解答。is_correct は記録時点の完全一致判定。"""

    question_id: str
    selected_option: str
    is_correct: bool


# ----------------------------------------------------------------------
#  画面状態
# ----------------------------------------------------------------------
class Screen(str, Enum):
    INTRO = "INTRO"
    LOADING = "LOADING"
    PLAYING = "PLAYING"
    RESULTS = "RESULTS"
    ERROR = "ERROR"


# ----------------------------------------------------------------------
#  セッション状態
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizSession:
    """
    1 セッション分のクイズ状態。

    - questions: 取得成功時に丸ごと置き換えられる
    - answers: セッション中は追記のみ
    - selected_option: 現在の問題で選択中（未確定）の選択肢
    - revealed: 現在の問題の正誤が表示済みか
    - generation: 問題取得ごとに増えるトークン。
      古い取得結果を破棄するために使う（reset しても戻さない）
    """

    screen: Screen = Screen.INTRO
    topic: str = ""
    questions: Tuple[QuizQuestion, ...] = ()
    current_index: int = 0
    answers: Tuple[UserAnswer, ...] = ()
    selected_option: Optional[str] = None
    revealed: bool = False
    error_message: Optional[str] = None
    generation: int = 0


# ----------------------------------------------------------------------
#  問題の取得元
# ----------------------------------------------------------------------
class QuestionGenerationFailed(RuntimeError):
    """問題生成の失敗（空応答・解析失敗・API エラーをまとめた 1 種類）。"""


class QuestionProvider(Protocol):
    """トピックから問題を取得する口。Gemini 実装は provider.py にある。"""

    def fetch_questions(self, topic: str) -> Sequence[QuizQuestion]:
        ...
