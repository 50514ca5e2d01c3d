"""
Tests for override file resolution and application.
"""

import asyncio
from pathlib import Path

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptloom.items import Section
from promptloom.override import (
    CoreOverrideDisabledError,
    Override,
    OverrideResult,
    override_paths,
)


def _base_section():
    return Section(title="Base").append(["original one", "original two"])


def _texts(section):
    return [item.text if not isinstance(item, Section) else item.title for item in section.items]


@allure.feature("Override")
@allure.story("Sibling file names")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(
    directory=st.sampled_from(["overrides", "./custom", "/etc/prompts"]),
    stem=st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12),
    folder=st.sampled_from(["", "persona/", "a/b/"]),
)
def test_override_paths_add_pre_and_post_suffixes(directory, stem, folder):
    """For any logical .md name, pre and post siblings share its folder and extension."""
    pre, post, base = override_paths(directory, f"{folder}{stem}.md")

    assert base == Path(directory) / f"{folder}{stem}.md"
    assert pre == base.with_name(f"{stem}-pre.md")
    assert post == base.with_name(f"{stem}-post.md")


@allure.feature("Override")
@allure.story("Exactly three existence checks")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize("files", [
    {},
    {"overrides/x-pre.md": "pre"},
    {"overrides/x-post.md": "post"},
    {"overrides/x-pre.md": "pre", "overrides/x-post.md": "post", "overrides/x.md": "full"},
])
def test_override_checks_three_paths(make_storage, files):
    storage = make_storage(files)
    override = Override(config_dir="overrides", overrides=True, storage=storage)

    asyncio.run(override.override("x.md", _base_section()))

    assert storage.exists_calls == ["overrides/x-pre.md", "overrides/x-post.md", "overrides/x.md"]


def test_no_override_files_yields_empty_result(make_storage):
    override = Override(config_dir="overrides", storage=make_storage())

    result = asyncio.run(override.override("x.md", _base_section()))

    assert result == OverrideResult()
    assert result.is_empty


@allure.feature("Override")
@allure.story("Pre file prepends")
@allure.severity(allure.severity_level.CRITICAL)
def test_pre_file_is_prepended(make_storage):
    storage = make_storage({"overrides/x-pre.md": "# Preamble\n\nRead this first."})
    override = Override(config_dir="overrides", storage=storage)
    section = _base_section()

    result = asyncio.run(override.override("x.md", section))
    assert result.prepend is not None
    assert result.append is None and result.override is None
    assert result.prepend.title == "Preamble"

    customized = asyncio.run(override.customize("x.md", section))

    assert customized is section
    assert _texts(customized) == ["Preamble", "original one", "original two"]
    assert _texts(customized.items[0]) == ["Read this first."]


def test_post_file_is_appended(make_storage):
    storage = make_storage({"overrides/x-post.md": "extra line"})
    override = Override(config_dir="overrides", storage=storage)

    customized = asyncio.run(override.customize("x.md", _base_section()))

    assert _texts(customized) == ["original one", "original two", "x-post"]
    assert _texts(customized.items[2]) == ["extra line"]


@allure.feature("Override")
@allure.story("Full override gating")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize("method", ["override", "customize"])
def test_full_override_requires_enabling(make_storage, recording_logger, method):
    storage = make_storage({
        "overrides/x-pre.md": "pre",
        "overrides/x.md": "replacement",
    })
    override = Override(config_dir="overrides", storage=storage, logger=recording_logger)
    section = _base_section()

    with pytest.raises(CoreOverrideDisabledError) as exc_info:
        asyncio.run(getattr(override, method)("x.md", section))

    assert Path(exc_info.value.path) == Path("overrides/x.md")
    assert _texts(section) == ["original one", "original two"]
    assert storage.reads == []
    assert recording_logger.messages("error")


def test_enabled_full_override_replaces_then_wraps(make_storage, recording_logger):
    storage = make_storage({
        "overrides/persona/default-pre.md": "before",
        "overrides/persona/default.md": "replacement line",
        "overrides/persona/default-post.md": "after",
    })
    override = Override(
        config_dir="overrides", overrides=True, storage=storage, logger=recording_logger
    )
    section = _base_section()

    customized = asyncio.run(override.customize("persona/default.md", section))

    assert customized is not section
    assert _texts(customized) == ["default-pre", "replacement line", "default-post"]
    assert _texts(section) == ["original one", "original two"]
    assert any("overwritten" in message for message in recording_logger.messages("warning"))


def test_override_files_receive_parameters(make_storage):
    storage = make_storage({"overrides/x-post.md": "Contact {{team}} for {{topic}}"})
    override = Override(config_dir="overrides", parameters={"team": "platform"}, storage=storage)

    customized = asyncio.run(
        override.customize("x.md", _base_section(), parameters={"topic": "access"})
    )

    assert customized.items[-1].items[0].text == "Contact platform for access"


def test_final_section_is_logged_at_debug(make_storage, recording_logger):
    storage = make_storage({"overrides/x-post.md": "after"})
    override = Override(config_dir="overrides", storage=storage, logger=recording_logger)

    asyncio.run(override.customize("x.md", _base_section()))

    assert any("Final section for x.md" in message for message in recording_logger.messages("debug"))
