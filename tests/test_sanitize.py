"""Sanitizer tests."""

import re

from specifythat.models.question import QuestionValidation
from specifythat.sanitize import apply_sanitization, sanitize_markdown, sanitize_project_name

MARKUP = "*_`#[]<>\\"


def _has_unescaped_markup(text: str) -> bool:
    i = 0
    while i < len(text):
        if text[i] == "\\":
            if i + 1 >= len(text) or text[i + 1] not in MARKUP:
                return True
            i += 2
            continue
        if text[i] in MARKUP:
            return True
        i += 1
    return False


def test_markdown_escapes_markup_characters():
    assert sanitize_markdown("**bold** and _it_") == r"\*\*bold\*\* and \_it\_"
    assert sanitize_markdown("<script>") == r"\<script\>"
    assert sanitize_markdown("# [link]") == r"\# \[link\]"
    assert sanitize_markdown("a\\b") == "a\\\\b"


def test_markdown_output_has_no_unescaped_markup():
    raw = "*_`#[]<>\\ mixed *with* text\x00 and `code`"
    assert not _has_unescaped_markup(sanitize_markdown(raw))


def test_markdown_strips_nulls_and_controls():
    assert sanitize_markdown("he\x00llo\x07 wor\x1bld") == "hello world"


def test_markdown_collapses_whitespace():
    assert sanitize_markdown("  line one\n\n\tline   two  ") == "line one line two"


def test_project_name_removes_markup():
    assert sanitize_project_name("**My** _Cool_ <App>") == "My Cool App"
    assert sanitize_project_name("a|b~c^d") == "abcd"


def test_project_name_output_has_no_markup_at_all():
    cleaned = sanitize_project_name("*_`#[]<>\\|~^ Name ^~|")
    assert cleaned == "Name"
    assert not re.search(r"[*_`#\[\]<>\\|~^]", cleaned)


def test_project_name_strips_newlines_and_tabs():
    assert sanitize_project_name("Invoice\nTrack\tPro\x00") == "InvoiceTrackPro"


def test_apply_sanitization_only_when_requested():
    raw = "*raw*"
    assert apply_sanitization(raw) == raw
    assert apply_sanitization(raw, QuestionValidation(sanitize=False), 2) == raw


def test_apply_sanitization_picks_mode_by_question():
    rules = QuestionValidation(sanitize=True)
    assert apply_sanitization("*Acme*", rules, 1) == "Acme"
    assert apply_sanitization("*Acme*", rules, 2) == r"\*Acme\*"
