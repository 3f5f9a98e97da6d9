from __future__ import annotations

from conftest import make_question
from quiz_master.controller import OptionHighlight
from quiz_master.models import UserAnswer
from quiz_master.ui import THEMES, _generate_css, option_html, review_html


def test_every_theme_renders_css():
    for theme in THEMES.values():
        css = _generate_css(theme)
        assert ".qm-option-correct" in css
        assert theme["correct"] in css


def test_correct_option_shows_success_indicator():
    snippet = option_html("Paris", OptionHighlight.CORRECT)
    assert "qm-option-correct" in snippet
    assert "Paris" in snippet
    assert "✅" in snippet


def test_incorrect_option_shows_failure_indicator():
    snippet = option_html("Rome", OptionHighlight.INCORRECT)
    assert "qm-option-incorrect" in snippet
    assert "❌" in snippet


def test_dimmed_option_has_no_indicator():
    snippet = option_html("Berlin", OptionHighlight.DIMMED)
    assert "qm-option-dimmed" in snippet
    assert "✅" not in snippet and "❌" not in snippet


def test_option_text_is_escaped():
    snippet = option_html("<b>bold</b>", OptionHighlight.DEFAULT)
    assert "&lt;b&gt;bold&lt;/b&gt;" in snippet


def test_review_of_correct_answer():
    q = make_question(3)
    answer = UserAnswer(question_id=q.id, selected_option=q.answer, is_correct=True)
    snippet = review_html(3, q, answer)
    assert "qm-review-correct" in snippet
    assert "#3" in snippet
    assert "You chose" not in snippet
    assert q.explanation in snippet


def test_review_of_wrong_answer_shows_choice():
    q = make_question(4)
    answer = UserAnswer(question_id=q.id, selected_option=q.options[2], is_correct=False)
    snippet = review_html(4, q, answer)
    assert "qm-review-incorrect" in snippet
    assert f"You chose: <b>{q.options[2]}</b>" in snippet
    assert f"Correct: <b>{q.answer}</b>" in snippet
