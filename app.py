"""
app.py
======================

Quiz Master（Streamlit）エントリーポイント。

特徴:
- 好きなトピックを入力すると Gemini が四択問題を 10 問生成する
- 1 問ずつ解答 → 正誤と解説の表示 → 次の問題へ
- 最後にスコアと全問の振り返りを表示

前提:
- 環境変数 GEMINI_API_KEY（または .env）に API キーが設定されていること
- config.toml は任意（無ければ既定値）

起動:
    streamlit run app.py
"""

from __future__ import annotations

import logging

import streamlit as st

from quiz_master import controller
from quiz_master.config import AppConfig, configure_logging
from quiz_master.models import QuizSession, Screen
from quiz_master.provider import GeminiQuestionProvider, effective_topic
from quiz_master.ui import (
    apply_theme,
    render_error,
    render_intro,
    render_loading,
    render_playing,
    render_results,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "quiz_session"


# ----------------------------------------------------------------------
#  設定 / プロバイダ（プロセス内で 1 度だけ初期化）
# ----------------------------------------------------------------------
@st.cache_resource(show_spinner=False)
def get_config() -> AppConfig:
    config = AppConfig.load()
    configure_logging(config)
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; question generation will fail")
    return config


@st.cache_resource(show_spinner=False)
def get_provider() -> GeminiQuestionProvider:
    return GeminiQuestionProvider(get_config())


# ----------------------------------------------------------------------
#  SessionState のラッパー
# ----------------------------------------------------------------------
def get_session() -> QuizSession:
    """QuizSession をセッションに保持して返す。"""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = controller.initial_session()
    return st.session_state[SESSION_KEY]  # type: ignore[return-value]


def update_session(session: QuizSession) -> None:
    """
    新しい QuizSession を保存する。
    内容が変わった場合のみ再描画する。
    """
    changed = session != st.session_state.get(SESSION_KEY)
    st.session_state[SESSION_KEY] = session
    if changed:
        st.rerun()


# ----------------------------------------------------------------------
#  画面ごとの処理
# ----------------------------------------------------------------------
def run_intro(session: QuizSession, config: AppConfig) -> None:
    ui_result = render_intro(session, app_name=config.app_name)
    if ui_result["clicked_start"]:
        session = controller.set_topic(session, ui_result["topic"])
        update_session(controller.start_quiz(session))


def run_loading(session: QuizSession) -> None:
    render_loading(session)
    with st.spinner(f"Asking Gemini about {effective_topic(session.topic)}..."):
        session = controller.load_questions(session, get_provider())
    update_session(session)


def run_playing(session: QuizSession) -> None:
    ui_result = render_playing(session)

    if ui_result["selected_option"] is not None:
        update_session(controller.select_option(session, ui_result["selected_option"]))
    elif ui_result["clicked_confirm"]:
        update_session(controller.confirm_answer(session))
    elif ui_result["clicked_next"]:
        update_session(controller.advance(session))


def run_results(session: QuizSession) -> None:
    ui_result = render_results(session)
    if ui_result["clicked_reset"]:
        update_session(controller.reset(session))


def run_error(session: QuizSession) -> None:
    ui_result = render_error(session)
    if ui_result["clicked_reset"]:
        update_session(controller.reset(session))


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    config = get_config()
    st.set_page_config(
        page_title=config.app_name,
        page_icon="🧠",
        layout="centered",
    )
    apply_theme(config.theme)

    session = get_session()

    if session.screen is Screen.LOADING:
        run_loading(session)
    elif session.screen is Screen.PLAYING:
        run_playing(session)
    elif session.screen is Screen.RESULTS:
        run_results(session)
    elif session.screen is Screen.ERROR:
        run_error(session)
    else:
        run_intro(session, config)


if __name__ == "__main__":
    main()
