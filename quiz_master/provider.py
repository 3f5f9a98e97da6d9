"""
provider.py
======================

Google Gemini API を使った問題生成アダプタ。

要件:
- トピック 1 つにつき、四択問題をちょうど 10 問まとめて生成する
- 応答は JSON (responseSchema で形を拘束) として受け取る
- 取得後に構造を検証し、不正なら生成失敗として扱う
  (answer が options に含まれない問題もここで弾く)
- 失敗の種類は呼び出し側に区別させない
  → すべて QuestionGenerationFailed。原因はログと例外チェーンに残す
- リトライ・バックオフ・キャッシュは行わない (1 回だけ呼ぶ)

QuestionGenerationFailed と QuestionProvider は models.py に置き、
controller.py は Gemini SDK を読み込まずにこのプロトコル経由で使う。
テストでは fetch_questions を持つ任意のオブジェクトに差し替えられる。
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import google.generativeai as genai

from .config import AppConfig
from .models import QuestionGenerationFailed, QuestionProvider, QuizQuestion

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "General Knowledge"
QUESTION_COUNT = 10
OPTION_COUNT = 4

REQUIRED_FIELDS = ("id", "question", "options", "answer", "explanation")


# ----------------------------------------------------------------------
#  プロンプト / スキーマ
# ----------------------------------------------------------------------
def effective_topic(topic: str) -> str:
    """空白のみのトピックは既定ラベルに置き換える。"""
    return topic.strip() or DEFAULT_TOPIC


def build_prompt(topic: str) -> str:
    return (
        f'Generate {QUESTION_COUNT} multiple-choice trivia questions about "{topic}".\n'
        f"Each question must have exactly {OPTION_COUNT} options.\n"
        "Ensure the questions are engaging and factually accurate."
    )


RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {
                "type": "STRING",
                "description": "A unique identifier for the question (e.g. q1, q2)",
            },
            "question": {"type": "STRING"},
            "options": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "An array of exactly 4 possible answers.",
            },
            "answer": {
                "type": "STRING",
                "description": "The correct answer text, must match one of the options exactly.",
            },
            "explanation": {
                "type": "STRING",
                "description": "A brief explanation of why the answer is correct.",
            },
        },
        "required": list(REQUIRED_FIELDS),
    },
}


# ----------------------------------------------------------------------
#  応答の解析と検証
# ----------------------------------------------------------------------
def parse_questions(text: str) -> Tuple[QuizQuestion, ...]:
    """
    Gemini の JSON テキストを QuizQuestion のタプルに変換する。

    次のいずれかに当てはまれば QuestionGenerationFailed:
    - JSON として読めない / 配列でない
    - 必須フィールドの欠落、文字列でない値
    - options がちょうど 4 つの相異なる文字列でない
    - answer が options のどれとも完全一致しない
    - id の重複
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionGenerationFailed("Response is not valid JSON") from exc

    if not isinstance(data, list):
        raise QuestionGenerationFailed(
            f"Expected a JSON array, got {type(data).__name__}"
        )

    questions: List[QuizQuestion] = []
    seen_ids = set()
    for pos, item in enumerate(data):
        _validate_item(pos, item)
        if item["id"] in seen_ids:
            raise QuestionGenerationFailed(
                f"Question {pos}: duplicate id {item['id']!r}"
            )
        seen_ids.add(item["id"])
        questions.append(QuizQuestion.from_dict(item))

    return tuple(questions)


def _validate_item(pos: int, item: Any) -> None:
    if not isinstance(item, dict):
        raise QuestionGenerationFailed(f"Question {pos}: not an object")

    missing = [name for name in REQUIRED_FIELDS if name not in item]
    if missing:
        raise QuestionGenerationFailed(
            f"Question {pos}: missing fields {', '.join(missing)}"
        )

    for name in ("id", "question", "answer", "explanation"):
        if not isinstance(item[name], str):
            raise QuestionGenerationFailed(f"Question {pos}: {name} must be a string")

    options = item["options"]
    if (
        not isinstance(options, list)
        or len(options) != OPTION_COUNT
        or not all(isinstance(o, str) for o in options)
        or len(set(options)) != OPTION_COUNT
    ):
        raise QuestionGenerationFailed(
            f"Question {pos}: options must be {OPTION_COUNT} distinct strings"
        )

    # 完全一致（大文字小文字・前後空白も区別）
    if item["answer"] not in options:
        raise QuestionGenerationFailed(
            f"Question {pos}: answer {item['answer']!r} is not one of the options"
        )


# ----------------------------------------------------------------------
#  Gemini 実装
# ----------------------------------------------------------------------
class GeminiQuestionProvider:
    """
    Gemini の generateContent を 1 回呼んで問題を得るプロバイダ。

    model を渡さない場合は config の API キーとモデル名から
    genai.GenerativeModel を組み立てる。
    """

    def __init__(self, config: AppConfig, model: Optional[Any] = None):
        self.config = config
        if model is None:
            genai.configure(api_key=config.gemini_api_key)
            model = genai.GenerativeModel(config.gemini_model)
        self._model = model

    def fetch_questions(self, topic: str) -> Tuple[QuizQuestion, ...]:
        subject = effective_topic(topic)
        prompt = build_prompt(subject)
        logger.info(
            "Requesting %d questions about %r from %s",
            QUESTION_COUNT,
            subject,
            self.config.gemini_model,
        )

        try:
            response = self._model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=copy.deepcopy(RESPONSE_SCHEMA),
                ),
            )
            # 候補が無い（ブロック等）場合は .text 自体が ValueError を投げる
            text = response.text
        except Exception as exc:
            logger.error("Gemini request failed: %s", exc, exc_info=True)
            raise QuestionGenerationFailed("Question generation request failed") from exc

        if not text:
            logger.error("Gemini returned no text for topic %r", subject)
            raise QuestionGenerationFailed("No text returned from Gemini")

        try:
            questions = parse_questions(text)
        except QuestionGenerationFailed as exc:
            logger.error("Rejected Gemini response for topic %r: %s", subject, exc)
            raise

        logger.info("Received %d questions about %r", len(questions), subject)
        return questions
