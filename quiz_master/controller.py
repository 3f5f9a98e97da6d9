"""
controller.py
======================

クイズの進行（状態遷移）を担当するモジュール。

    INTRO --start_quiz--> LOADING --complete_fetch--> PLAYING --advance(最終問)--> RESULTS
                             |                                                        |
                             +--fail_fetch / 0 問--> ERROR                            |
                                                      |                               |
    INTRO <------------------------ reset ------------+-------------------------------+

どの関数も QuizSession を受け取り、新しい QuizSession を返す純粋関数。
許されない操作はエラーにせず、受け取ったセッションをそのまま返す（no-op）。

スコア・進捗・選択肢のハイライトは保持せず、毎回セッションから導出する。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from .models import (
    QuestionGenerationFailed,
    QuestionProvider,
    QuizQuestion,
    QuizSession,
    Screen,
    UserAnswer,
)

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate questions. Please try again."


class OptionHighlight(str, Enum):
    """選択肢ボタンの表示状態。"""

    DEFAULT = "default"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    DIMMED = "dimmed"


# ----------------------------------------------------------------------
#  初期化
# ----------------------------------------------------------------------
def initial_session() -> QuizSession:
    return QuizSession()


def set_topic(session: QuizSession, topic: str) -> QuizSession:
    """トピックの入力は INTRO 画面でのみ受け付ける。"""
    if session.screen is not Screen.INTRO:
        return session
    return replace(session, topic=topic)


# ----------------------------------------------------------------------
#  問題の取得
# ----------------------------------------------------------------------
def start_quiz(session: QuizSession) -> QuizSession:
    """
    INTRO → LOADING。

    generation を進めるので、これ以前に始まった取得の結果は
    complete_fetch / fail_fetch で破棄される。
    """
    if session.screen is not Screen.INTRO:
        return session
    logger.debug("Starting quiz on topic %r", session.topic)
    return replace(
        session,
        screen=Screen.LOADING,
        error_message=None,
        generation=session.generation + 1,
    )


def complete_fetch(
    session: QuizSession,
    generation: int,
    questions: Sequence[QuizQuestion],
) -> QuizSession:
    """
    取得成功時の遷移。LOADING → PLAYING。

    0 問だった場合は生成失敗と同じく ERROR へ。
    """
    if _is_stale(session, generation):
        logger.info("Discarding questions from superseded fetch %d", generation)
        return session

    if not questions:
        return fail_fetch(session, generation, "No questions generated.")

    return replace(
        session,
        screen=Screen.PLAYING,
        questions=tuple(questions),
        current_index=0,
        answers=(),
        selected_option=None,
        revealed=False,
        error_message=None,
    )


def fail_fetch(session: QuizSession, generation: int, cause: object) -> QuizSession:
    """
    取得失敗時の遷移。LOADING → ERROR。

    画面には固定メッセージだけを出し、原因はログに残す。
    topic は ERROR 画面での表示用にそのまま保持する。
    """
    if _is_stale(session, generation):
        logger.info("Ignoring failure from superseded fetch %d: %s", generation, cause)
        return session

    logger.error("Question generation failed for topic %r: %s", session.topic, cause)
    return replace(
        session,
        screen=Screen.ERROR,
        error_message=GENERATION_FAILED_MESSAGE,
    )


def load_questions(session: QuizSession, provider: QuestionProvider) -> QuizSession:
    """
    LOADING 中のセッションについて provider を 1 回呼び、結果を反映する。
    LOADING 以外では何もしない。
    """
    if session.screen is not Screen.LOADING:
        return session

    generation = session.generation
    try:
        questions = provider.fetch_questions(session.topic)
    except QuestionGenerationFailed as exc:
        cause = exc.__cause__ or exc
        return fail_fetch(session, generation, cause)
    return complete_fetch(session, generation, questions)


def _is_stale(session: QuizSession, generation: int) -> bool:
    return session.screen is not Screen.LOADING or generation != session.generation


# ----------------------------------------------------------------------
#  解答
# ----------------------------------------------------------------------
def select_option(session: QuizSession, option: str) -> QuizSession:
    if session.screen is not Screen.PLAYING or session.revealed:
        return session
    if session.selected_option == option:
        return session
    return replace(session, selected_option=option)


def confirm_answer(session: QuizSession) -> QuizSession:
    """
    選択中の選択肢を確定して正誤を表示する。
    UserAnswer を 1 件だけ追加し、同じ問題での 2 回目以降は no-op。
    """
    if (
        session.screen is not Screen.PLAYING
        or session.selected_option is None
        or session.revealed
    ):
        return session

    question = session.questions[session.current_index]
    answer = UserAnswer(
        question_id=question.id,
        selected_option=session.selected_option,
        is_correct=session.selected_option == question.answer,
    )
    logger.debug(
        "Question %s answered %s",
        question.id,
        "correctly" if answer.is_correct else "incorrectly",
    )
    return replace(
        session,
        revealed=True,
        answers=session.answers + (answer,),
    )


def advance(session: QuizSession) -> QuizSession:
    """次の問題へ。最終問なら RESULTS へ。正誤表示前は no-op。"""
    if session.screen is not Screen.PLAYING or not session.revealed:
        return session

    if is_last_question(session):
        logger.debug("Quiz finished with score %d/%d", score(session), len(session.questions))
        return replace(session, screen=Screen.RESULTS)

    return replace(
        session,
        current_index=session.current_index + 1,
        selected_option=None,
        revealed=False,
    )


# ----------------------------------------------------------------------
#  リセット
# ----------------------------------------------------------------------
def reset(session: QuizSession) -> QuizSession:
    """
    RESULTS / ERROR から INTRO へ戻す。topic も含めて全て初期化する。
    generation だけは進め、取得中の結果が万一届いても反映されないようにする。
    """
    if session.screen not in (Screen.RESULTS, Screen.ERROR):
        return session
    return replace(initial_session(), generation=session.generation + 1)


# ----------------------------------------------------------------------
#  導出値
# ----------------------------------------------------------------------
def current_question(session: QuizSession) -> Optional[QuizQuestion]:
    if not session.questions:
        return None
    return session.questions[session.current_index]


def is_last_question(session: QuizSession) -> bool:
    return session.current_index >= len(session.questions) - 1


def progress(session: QuizSession) -> Tuple[int, int]:
    """(何問目か, 全問数)。問題が無ければ (0, 0)。"""
    total = len(session.questions)
    if total == 0:
        return (0, 0)
    return (session.current_index + 1, total)


def score(session: QuizSession) -> int:
    return sum(1 for a in session.answers if a.is_correct)


def percentage(session: QuizSession) -> int:
    """
    正答率 (%)。四捨五入（0.5 は切り上げ）。
    全問数 0 の場合は 0。
    """
    total = len(session.questions)
    if total == 0:
        return 0
    return (200 * score(session) + total) // (2 * total)


def answer_for(session: QuizSession, question_id: str) -> Optional[UserAnswer]:
    for a in session.answers:
        if a.question_id == question_id:
            return a
    return None


def option_highlight(session: QuizSession, option: str) -> OptionHighlight:
    """
    現在の問題における選択肢 option の表示状態。

    正誤表示後:
        正解の選択肢 → CORRECT（ユーザーの選択に関わらず常に）
        誤って選んだ選択肢 → INCORRECT
        それ以外 → DIMMED
    正誤表示前:
        選択中 → SELECTED、それ以外 → DEFAULT
    """
    question = current_question(session)
    if session.revealed and question is not None:
        if option == question.answer:
            return OptionHighlight.CORRECT
        if option == session.selected_option:
            return OptionHighlight.INCORRECT
        return OptionHighlight.DIMMED
    if option == session.selected_option:
        return OptionHighlight.SELECTED
    return OptionHighlight.DEFAULT
