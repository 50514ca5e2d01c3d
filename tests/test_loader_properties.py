"""
Tests for directory loading.
"""

import asyncio

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptloom.items import Context, Section
from promptloom.loader import Loader, extract_first_header, remove_first_header


def heading_text_strategy():
    return st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
        min_size=1,
        max_size=30,
    ).map(str.strip).filter(bool)


@allure.feature("Loader")
@allure.story("First header extraction")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(level=st.integers(min_value=1, max_value=6), title=heading_text_strategy(),
       body=st.text(alphabet="abcdef \n", max_size=40))
def test_first_header_is_extracted_and_removed(level, title, body):
    """For any leading heading, extraction returns its text and removal leaves the body."""
    markdown_text = f"{'#' * level} {title}\n{body}"

    assert extract_first_header(markdown_text) == title
    assert remove_first_header(markdown_text) == body.strip()


def test_header_helpers_ignore_text_without_leading_heading():
    text = "intro\n# Later heading"

    assert extract_first_header(text) is None
    assert remove_first_header(text) == text


def test_header_helpers_skip_leading_blank_lines():
    assert extract_first_header("\n\n## Glossary\nTerms") == "Glossary"
    assert remove_first_header("\n\n## Glossary\nTerms") == "Terms"


@pytest.mark.parametrize("text,expected", [
    ("# C#\n\nbody", "C#"),
    ("## Title ##\nbody", "Title"),
    ("# Issue #42\nbody", "Issue #42"),
    ("### Spaced   \nbody", "Spaced"),
])
def test_closing_hashes_need_leading_whitespace(text, expected):
    assert extract_first_header(text) == expected
    assert remove_first_header(text) == "body"


@allure.feature("Loader")
@allure.story("Undecodable files keep the directory")
@allure.severity(allure.severity_level.CRITICAL)
def test_non_utf8_file_does_not_drop_directory(make_storage, recording_logger):
    storage = make_storage({
        "ctx/company/context.md": "# Company\n\nWe ship tools.",
        "ctx/company/notes.txt": "caf\xe9 menu".encode("latin-1"),
        "ctx/company/values.md": "# Values\n\nBe kind.",
    })
    loader = Loader(storage=storage, logger=recording_logger)

    sections = asyncio.run(loader.load(["ctx/company"]))

    assert len(sections) == 1
    company = sections[0]
    assert company.title == "Company"
    assert _titles(company) == ["We ship tools.", "notes.txt", "Values"]
    assert company.items[1].items[0].text == "caf\ufffd menu"
    assert recording_logger.messages("error") == []


def test_non_utf8_real_file_is_decoded_leniently(tmp_path):
    directory = tmp_path / "company"
    directory.mkdir()
    (directory / "context.md").write_text("# Company\n\nWe ship tools.", encoding="utf-8")
    (directory / "notes.txt").write_bytes("caf\xe9".encode("latin-1"))

    sections = asyncio.run(Loader().load([directory]))

    assert sections[0].title == "Company"
    assert sections[0].items[1].items[0].text == "caf\ufffd"


def _titles(section):
    return [item.title if isinstance(item, Section) else item.text for item in section.items]


@allure.feature("Loader")
@allure.story("Directory becomes a section")
@allure.severity(allure.severity_level.CRITICAL)
def test_directory_with_context_file(make_storage):
    storage = make_storage({
        "ctx/product/context.md": "# Product\n\nAtlas is a {{kind}}.",
        "ctx/product/pricing.md": "## Pricing\n\nFree tier available.",
        "ctx/product/notes.txt": "keep it short",
        "ctx/product/.hidden": "secret",
        "ctx/product/logo.png": b"\x89PNG\x00",
        "ctx/product/nested/deep.md": "not loaded",
    })
    loader = Loader(parameters={"kind": "database"}, storage=storage)

    sections = asyncio.run(loader.load(["ctx/product"], item_type=Context))

    assert len(sections) == 1
    product = sections[0]
    assert product.title == "Product"
    assert product.items[0].text == "Atlas is a database."
    assert isinstance(product.items[0], Context)

    children = [item for item in product.items if isinstance(item, Section)]
    assert [child.title for child in children] == ["notes.txt", "Pricing"]
    assert children[0].items[0].text == "keep it short"
    assert children[1].items[0].text == "Free tier available."


def test_directory_without_context_file_uses_directory_name(make_storage):
    storage = make_storage({"docs/guide/a.md": "plain body"})

    sections = asyncio.run(Loader(storage=storage).load(["docs/guide"]))

    assert sections[0].title == "guide"
    assert sections[0].items[0].title == "a.md"


def test_empty_context_body_adds_no_item(make_storage):
    storage = make_storage({"d/context.md": "# Only A Title\n", "d/x.txt": ""})

    section = asyncio.run(Loader(storage=storage).load(["d"]))[0]

    assert section.title == "Only A Title"
    assert len(section.items) == 1
    assert section.items[0].title == "x.txt"
    assert section.items[0].items == []


def test_weights_apply_to_sections_and_items(make_storage):
    storage = make_storage({"d/context.md": "intro", "d/a.txt": "body"})

    section = asyncio.run(Loader(storage=storage).load(["d"], weight=3.0, item_weight=0.25))[0]

    assert section.weight == 3.0
    assert section.items[0].weight == 0.25
    assert section.items[1].weight == 3.0
    assert section.items[1].items[0].weight == 0.25


@allure.feature("Loader")
@allure.story("Failing directories are skipped")
@allure.severity(allure.severity_level.CRITICAL)
def test_failing_directory_is_logged_and_skipped(make_storage, recording_logger):
    storage = make_storage({"one/a.txt": "a", "three/c.txt": "c"})
    loader = Loader(storage=storage, logger=recording_logger)

    sections = asyncio.run(loader.load(["one", "missing", "three"]))

    assert [section.title for section in sections] == ["one", "three"]
    assert any("missing" in message for message in recording_logger.messages("error"))


@pytest.mark.parametrize("directories", [None, []])
def test_no_directories_yields_no_sections(make_storage, directories):
    assert asyncio.run(Loader(storage=make_storage()).load(directories)) == []


def test_custom_ignore_patterns(make_storage):
    storage = make_storage({"d/keep.md": "kept", "d/skip.tmp": "skipped", "d/.env": "dot"})

    section = asyncio.run(Loader(ignore_patterns=[r"\.tmp$"], storage=storage).load(["d"]))[0]

    assert [item.title for item in section.items] == [".env", "keep.md"]


def test_loads_real_directories(tmp_path):
    directory = tmp_path / "company"
    directory.mkdir()
    (directory / "context.md").write_text("# Company\n\nWe ship tools.", encoding="utf-8")
    (directory / "values.md").write_text("# Values\n\nBe kind.", encoding="utf-8")

    sections = asyncio.run(Loader().load([directory]))

    assert sections[0].title == "Company"
    assert sections[0].items[0].text == "We ship tools."
    assert sections[0].items[1].title == "Values"
    assert sections[0].items[1].items[0].text == "Be kind."
