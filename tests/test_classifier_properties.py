"""
Property-based tests for the Markdown and text classifiers.
"""

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptloom.util import is_markdown, is_text


def plain_line_strategy():
    """Generate lines free of any Markdown feature."""
    return st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz ,."),
        min_size=1,
        max_size=40,
    ).filter(lambda line: line.strip())


FEATURE_LINE = "Run the `build` step before release."


def _plain_lines(count: int) -> list[str]:
    return [f"plain line number {index}" for index in range(count)]


# Markdown detection

@allure.feature("Classifiers")
@allure.story("Feature ratio boundary")
@allure.severity(allure.severity_level.CRITICAL)
def test_one_feature_in_twenty_lines_is_markdown():
    lines = _plain_lines(19) + [FEATURE_LINE]

    assert is_markdown("\n".join(lines))


@allure.feature("Classifiers")
@allure.story("Feature ratio boundary")
@allure.severity(allure.severity_level.CRITICAL)
def test_one_feature_in_twenty_one_lines_is_text():
    lines = _plain_lines(20) + [FEATURE_LINE]

    assert not is_markdown("\n".join(lines))


def test_blank_lines_do_not_dilute_the_ratio():
    lines = _plain_lines(19) + [FEATURE_LINE]

    assert is_markdown("\n\n\n".join(lines))


def test_short_text_with_one_feature_is_markdown():
    assert is_markdown("hello\nsee `code` here\nbye")


def test_two_features_are_markdown():
    lines = _plain_lines(60)
    lines[10] = FEATURE_LINE
    lines[40] = FEATURE_LINE

    assert is_markdown("\n".join(lines))


@pytest.mark.parametrize("content", [
    "# Hello\nThis is a test.",
    "intro\n- item one\n- item two",
    "> quoted",
    "[link](https://example.com)",
    "```\ncode\n```",
    "text\n---\nmore",
    b"# Bytes heading\nbody",
])
def test_syntax_markers_are_markdown(content):
    assert is_markdown(content)


@pytest.mark.parametrize("content", [
    "This is a plain text string.",
    "",
    "   \n\t\n",
    None,
])
def test_plain_or_empty_input_is_not_markdown(content):
    assert not is_markdown(content)


@allure.feature("Classifiers")
@allure.story("Plain prose")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(lines=st.lists(plain_line_strategy(), min_size=1, max_size=30))
def test_prose_without_features_is_not_markdown(lines):
    """For any text built from feature-free lines, the classifier says text."""
    assert not is_markdown("\n".join(lines))


# Text detection

@allure.feature("Classifiers")
@allure.story("Binary detection")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(before=st.binary(max_size=100), after=st.binary(max_size=100))
def test_any_nul_byte_is_binary(before, after):
    """For any buffer containing a NUL byte, is_text is False."""
    assert not is_text(before + b"\x00" + after)


@allure.feature("Classifiers")
@allure.story("Text detection")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(text=st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs")) | st.sampled_from("\t\n\r"),
    max_size=300,
))
def test_printable_text_is_text(text):
    """For any text free of control characters other than tab, LF and CR, is_text is True."""
    assert is_text(text)
    assert is_text(text.encode("utf-8"))


def test_empty_input_is_text():
    assert is_text("")
    assert is_text(b"")


def test_control_heavy_input_is_binary():
    assert not is_text(b"\x01\x02\x03\x04abcdef")


def test_few_control_characters_are_tolerated():
    assert is_text("a" * 95 + "\x07" * 5)
    assert not is_text("a" * 90 + "\x07" * 10)
