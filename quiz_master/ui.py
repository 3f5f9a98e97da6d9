"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- 各画面（イントロ / 生成中 / 出題 / 結果 / エラー）の描画
- テーマ切替と CSS 注入
- 選択肢のハイライト表示（controller.option_highlight の結果を見た目に変換）

状態遷移などのロジックは controller.py 側に任せ、
各 render_* は「何が押されたか」を dict で返すだけにする。
"""

from __future__ import annotations

import html
from typing import Any, Dict, Optional

import streamlit as st

from . import controller
from .controller import OptionHighlight
from .models import QuizQuestion, QuizSession, UserAnswer
from .provider import effective_topic

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#ffffff",
        "text": "#1c1c1e",
        "surface": "#f2f2f7",
        "surface_alt": "#ffffff",
        "border": "#d1d1d6",
        "primary": "#4f46e5",
        "correct": "#16a34a",
        "incorrect": "#dc2626",
    },
    "dark": {
        "bg": "#000000",
        "text": "#f5f5f7",
        "surface": "#1c1c1e",
        "surface_alt": "#2c2c2e",
        "border": "#3a3a3c",
        "primary": "#818cf8",
        "correct": "#30d158",
        "incorrect": "#ff453a",
    },
    "blue": {
        "bg": "#f5f9ff",
        "text": "#0a1a2f",
        "surface": "#e8f0ff",
        "surface_alt": "#ffffff",
        "border": "#c9d6e8",
        "primary": "#0066cc",
        "correct": "#1f9d55",
        "incorrect": "#d64545",
    },
}

THEME_LABELS = {"light": "Light", "dark": "Dark", "blue": "Blue"}

# ハイライト状態 → CSS クラス / 末尾アイコン
HIGHLIGHT_CLASSES: Dict[OptionHighlight, str] = {
    OptionHighlight.DEFAULT: "qm-option",
    OptionHighlight.SELECTED: "qm-option qm-option-selected",
    OptionHighlight.CORRECT: "qm-option qm-option-correct",
    OptionHighlight.INCORRECT: "qm-option qm-option-incorrect",
    OptionHighlight.DIMMED: "qm-option qm-option-dimmed",
}

HIGHLIGHT_ICONS: Dict[OptionHighlight, str] = {
    OptionHighlight.CORRECT: "✅",
    OptionHighlight.INCORRECT: "❌",
}


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    .qm-header {{
        display: flex;
        justify-content: space-between;
        align-items: center;
        gap: 0.5rem;
        margin-bottom: 0.5rem;
        font-size: 0.85rem;
        text-transform: uppercase;
        letter-spacing: 0.05em;
        color: {theme['text']}aa;
    }}

    .qm-topic-badge {{
        padding: 0.1rem 0.6rem;
        border-radius: 999px;
        background: {theme['primary']}22;
        color: {theme['primary']};
        font-weight: 700;
        font-size: 0.75rem;
    }}

    .qm-question {{
        font-size: 1.5rem;
        font-weight: 700;
        line-height: 1.35;
        margin: 0.75rem 0 1rem 0;
        color: {theme['text']};
    }}

    .qm-option {{
        display: flex;
        justify-content: space-between;
        align-items: center;
        width: 100%;
        padding: 0.9rem 1rem;
        font-size: 1.05rem;
        border-radius: 10px;
        margin-bottom: 0.45rem;
        border: 2px solid {theme['border']};
        background: {theme['surface_alt']};
        color: {theme['text']};
    }}

    .qm-option-selected {{
        border-color: {theme['primary']};
        background: {theme['primary']}11;
    }}

    .qm-option-correct {{
        border-color: {theme['correct']};
        background: {theme['correct']}22;
    }}

    .qm-option-incorrect {{
        border-color: {theme['incorrect']};
        background: {theme['incorrect']}22;
    }}

    .qm-option-dimmed {{
        opacity: 0.5;
    }}

    .qm-explanation {{
        padding: 0.9rem;
        border-radius: 10px;
        background: {theme['primary']}11;
        border: 1px solid {theme['primary']}33;
        font-size: 0.95rem;
        line-height: 1.6;
        margin: 0.5rem 0 0.75rem 0;
    }}

    .qm-review {{
        padding: 0.9rem 1rem;
        border-radius: 10px;
        border-left: 4px solid {theme['border']};
        background: {theme['surface']};
        margin-bottom: 0.6rem;
        font-size: 0.9rem;
    }}

    .qm-review-correct {{
        border-left-color: {theme['correct']};
    }}

    .qm-review-incorrect {{
        border-left-color: {theme['incorrect']};
    }}

    .qm-review-chosen {{
        color: {theme['incorrect']};
    }}

    .qm-review-explanation {{
        margin-top: 0.4rem;
        padding-top: 0.4rem;
        border-top: 1px solid {theme['border']};
        font-style: italic;
        font-size: 0.8rem;
        opacity: 0.8;
    }}

    .qm-score {{
        text-align: center;
        font-size: 3rem;
        font-weight: 800;
        color: {theme['primary']};
    }}

    .qm-footer {{
        margin-top: 1rem;
        text-align: center;
        font-size: 0.8rem;
        color: {theme['text']}88;
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  テーマ関連
# ----------------------------------------------------------------------
def _ensure_theme(default: str = "light") -> str:
    """セッションに theme キーを用意し、現在のテーマキーを返す。"""
    if "theme" not in st.session_state:
        st.session_state["theme"] = default if default in THEMES else "light"
    theme_key = st.session_state.get("theme", "light")
    if theme_key not in THEMES:
        theme_key = "light"
        st.session_state["theme"] = "light"
    return theme_key


def apply_theme(default: str = "light") -> str:
    """
    サイドバーにテーマ切替を表示し、選ばれたテーマの CSS を注入する。
    現在のテーマキーを返す。
    """
    theme_key = _ensure_theme(default)
    options = list(THEMES.keys())
    selected = st.sidebar.radio(
        "Theme",
        options,
        index=options.index(theme_key),
        format_func=lambda k: THEME_LABELS.get(k, k),
    )
    st.session_state["theme"] = selected
    st.markdown(_generate_css(THEMES[selected]), unsafe_allow_html=True)
    return selected


def option_html(text: str, highlight: OptionHighlight) -> str:
    """正誤表示後の選択肢 1 つ分の HTML。"""
    icon = HIGHLIGHT_ICONS.get(highlight, "")
    return (
        f"<div class='{HIGHLIGHT_CLASSES[highlight]}'>"
        f"<span>{html.escape(text)}</span><span>{icon}</span>"
        "</div>"
    )


# ----------------------------------------------------------------------
#  画面: イントロ
# ----------------------------------------------------------------------
def render_intro(session: QuizSession, app_name: str = "Quiz Master") -> Dict[str, Any]:
    """
    戻り値:
        {"topic": str, "clicked_start": bool}
    """
    st.markdown(f"# 🧠 {html.escape(app_name)}")
    st.write("Challenge yourself with AI-generated trivia. Enter any topic below!")

    with st.form("qm_intro"):
        topic = st.text_input(
            "Topic",
            value=session.topic,
            placeholder="e.g., Quantum Physics, 90s Pop Music, World History",
            label_visibility="collapsed",
        )
        clicked_start = st.form_submit_button("Start Quiz", width="stretch")

    st.markdown(
        "<div class='qm-footer'>Powered by Google Gemini</div>",
        unsafe_allow_html=True,
    )
    return {"topic": topic, "clicked_start": clicked_start}


# ----------------------------------------------------------------------
#  画面: 生成中
# ----------------------------------------------------------------------
def render_loading(session: QuizSession) -> None:
    st.markdown("## Generating your quiz...")
    st.write(f'Crafting questions about "{effective_topic(session.topic)}"')


# ----------------------------------------------------------------------
#  画面: エラー
# ----------------------------------------------------------------------
def render_error(session: QuizSession) -> Dict[str, Any]:
    """戻り値: {"clicked_reset": bool}"""
    st.markdown("## ❌ Oops! Something went wrong.")
    st.error(session.error_message or controller.GENERATION_FAILED_MESSAGE)
    if session.topic:
        st.caption(f"Topic: {session.topic}")
    clicked_reset = st.button("Try Again", key="qm_error_reset", width="stretch")
    return {"clicked_reset": clicked_reset}


# ----------------------------------------------------------------------
#  画面: 出題
# ----------------------------------------------------------------------
def render_playing(session: QuizSession) -> Dict[str, Any]:
    """
    出題画面を描画し、ユーザー操作の結果を返す。

    戻り値:
        {
          "selected_option": Optional[str],  # 新たに押された選択肢 (なければ None)
          "clicked_confirm": bool,
          "clicked_next": bool,
        }
    """
    selected_option: Optional[str] = None
    clicked_confirm = False
    clicked_next = False

    q = controller.current_question(session)
    if q is None:
        st.error("No question is loaded.")
        return {
            "selected_option": None,
            "clicked_confirm": False,
            "clicked_next": False,
        }

    number, total = controller.progress(session)

    # ----------------------------------------
    # ヘッダー / 進捗
    # ----------------------------------------
    st.markdown(
        "<div class='qm-header'>"
        f"<span>Question {number} / {total}</span>"
        f"<span class='qm-topic-badge'>{html.escape(session.topic or 'General')}</span>"
        "</div>",
        unsafe_allow_html=True,
    )
    st.progress(number / total)

    st.markdown(
        f"<div class='qm-question'>{html.escape(q.question)}</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 選択肢
    # ----------------------------------------
    for idx, option in enumerate(q.options):
        highlight = controller.option_highlight(session, option)
        if session.revealed:
            # 正誤表示後はクリック不可の表示のみ
            st.markdown(option_html(option, highlight), unsafe_allow_html=True)
            continue

        if st.button(
            option,
            key=f"qm_option_{session.current_index}_{idx}",
            type="primary" if highlight is OptionHighlight.SELECTED else "secondary",
            width="stretch",
        ):
            selected_option = option

    st.write("---")

    # ----------------------------------------
    # 確定 / 解説 / 次へ
    # ----------------------------------------
    if not session.revealed:
        clicked_confirm = st.button(
            "Submit Answer",
            key="qm_confirm",
            disabled=session.selected_option is None,
            width="stretch",
        )
    else:
        st.markdown(
            "<div class='qm-explanation'><b>Explanation:</b><br>"
            f"{html.escape(q.explanation)}</div>",
            unsafe_allow_html=True,
        )
        label = "See Results ▶" if controller.is_last_question(session) else "Next Question ▶"
        clicked_next = st.button(label, key="qm_next", width="stretch")

    return {
        "selected_option": selected_option,
        "clicked_confirm": clicked_confirm,
        "clicked_next": clicked_next,
    }


# ----------------------------------------------------------------------
#  画面: 結果
# ----------------------------------------------------------------------
def render_results(session: QuizSession) -> Dict[str, Any]:
    """戻り値: {"clicked_reset": bool}"""
    total = len(session.questions)
    st.markdown("## 🏆 Quiz Complete!")
    st.markdown(
        f"<div class='qm-score'>{controller.percentage(session)}%</div>",
        unsafe_allow_html=True,
    )
    st.markdown(f"You scored **{controller.score(session)}** out of **{total}**")

    for idx, q in enumerate(session.questions, start=1):
        answer = controller.answer_for(session, q.id)
        st.markdown(review_html(idx, q, answer), unsafe_allow_html=True)

    clicked_reset = st.button("🔄 Play Again", key="qm_results_reset", width="stretch")
    return {"clicked_reset": clicked_reset}


def review_html(number: int, q: QuizQuestion, answer: Optional[UserAnswer]) -> str:
    """結果画面の 1 問分の振り返り HTML。未解答の問題は不正解として扱う。"""
    is_correct = answer is not None and answer.is_correct

    parts = [
        f"<div class='qm-review {'qm-review-correct' if is_correct else 'qm-review-incorrect'}'>",
        f"<div>{'✅' if is_correct else '❌'} <b>#{number}</b> {html.escape(q.question)}</div>",
        f"<div>Correct: <b>{html.escape(q.answer)}</b></div>",
    ]
    if not is_correct and answer is not None:
        parts.append(
            "<div class='qm-review-chosen'>"
            f"You chose: <b>{html.escape(answer.selected_option)}</b></div>"
        )
    parts.append(f"<div class='qm-review-explanation'>{html.escape(q.explanation)}</div>")
    parts.append("</div>")
    return "".join(parts)
