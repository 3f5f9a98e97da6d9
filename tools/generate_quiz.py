"""
tools/generate_quiz.py
===========================

指定したトピックで Gemini に問題を 1 回だけ生成させ、
結果を JSON として標準出力に書き出す開発用スクリプト。

主な用途:
- プロンプトや responseSchema を変更したときの動作確認
- UI を立ち上げずに、生成結果の検証（answer ∈ options など）を試す

前提:
- 環境変数 GEMINI_API_KEY（または .env）に API キーが設定されている
- pip で `google-generativeai` がインストールされていること

例:
    python tools/generate_quiz.py --topic "Roman History"
    python tools/generate_quiz.py --topic "Jazz" --model gemini-2.5-pro --output jazz.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from quiz_master.config import AppConfig, configure_logging
from quiz_master.provider import (
    GeminiQuestionProvider,
    QuestionGenerationFailed,
    QuestionProvider,
    effective_topic,
)

logger = logging.getLogger(__name__)


# -------------------------------------------------------------
#  メイン処理
# -------------------------------------------------------------
def generate(
    provider: QuestionProvider,
    topic: str,
    output: Optional[Path] = None,
) -> int:
    """
    問題を生成して出力する。終了コードを返す。

    - output 指定時はファイルへ、無指定なら標準出力へ書き出す
    - 生成に失敗した場合は 1、0 問だった場合は 2
    """
    try:
        questions = provider.fetch_questions(topic)
    except QuestionGenerationFailed as exc:
        logger.error(
            "Question generation failed for topic %r: %s",
            effective_topic(topic),
            exc.__cause__ or exc,
        )
        print(f"Question generation failed: {exc}", file=sys.stderr)
        return 1

    if not questions:
        print("No questions were generated.", file=sys.stderr)
        return 2

    payload = json.dumps(
        [q.to_dict() for q in questions],
        ensure_ascii=False,
        indent=2,
    )

    if output is None:
        print(payload)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        print(
            f"Wrote {len(questions)} questions about "
            f"{effective_topic(topic)!r} to {output}",
            file=sys.stderr,
        )
    return 0


# -------------------------------------------------------------
#  CLI エントリーポイント
# -------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate one Quiz Master question set with Gemini and print it as JSON",
    )
    parser.add_argument(
        "--topic",
        type=str,
        default="",
        help="quiz topic (default: General Knowledge)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Gemini model name, overrides config.toml",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="write the questions to this file instead of stdout",
    )
    args = parser.parse_args(argv)

    config = AppConfig.load()
    if args.model:
        config.gemini_model = args.model
    configure_logging(config)

    if not config.gemini_api_key:
        parser.error("GEMINI_API_KEY is not set")

    return generate(
        GeminiQuestionProvider(config),
        topic=args.topic,
        output=args.output,
    )


if __name__ == "__main__":
    sys.exit(main())
