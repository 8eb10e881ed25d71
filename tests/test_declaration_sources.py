"""Tests for declaration source precedence and file-based parsing."""

import logging

import pytest

from versioning.errors import (
    ConfigurationError,
    DeclarationFileNotFoundError,
    MalformedDeclarationError,
)
from versioning.models import DeclarationInputs, DeclarationSource, VersionSpec
from versioning.parser import parse_declaration, select_source


def make_inputs(tmp_path, **kwargs) -> DeclarationInputs:
    """Helper to create inputs rooted at tmp_path."""
    return DeclarationInputs(working_directory=str(tmp_path), **kwargs)


class TestSelectSource:
    """Test the precedence table."""

    def test_explicit_wins_over_everything(self, tmp_path):
        (tmp_path / "Gemfile.lock").write_text("RUBY VERSION\n   3.1.2\n", encoding="utf-8")
        (tmp_path / ".ruby-version").write_text("3.0.6\n", encoding="utf-8")
        inputs = make_inputs(tmp_path, ruby_version="3.2")
        assert select_source(inputs) == DeclarationSource.EXPLICIT

    def test_explicit_with_explicit_lockfile_warns(self, tmp_path, caplog):
        inputs = make_inputs(
            tmp_path, ruby_version="3.2", version_file="other.lock", version_file_explicit=True
        )
        with caplog.at_level(logging.WARNING):
            assert select_source(inputs) == DeclarationSource.EXPLICIT
        assert "only ruby-version will be used" in caplog.text

    def test_explicit_with_default_lockfile_does_not_warn(self, tmp_path, caplog):
        inputs = make_inputs(tmp_path, ruby_version="3.2")
        with caplog.at_level(logging.WARNING):
            select_source(inputs)
        assert "only ruby-version will be used" not in caplog.text

    def test_lockfile_before_version_files(self, tmp_path):
        (tmp_path / "Gemfile.lock").write_text("RUBY VERSION\n   3.1.2\n", encoding="utf-8")
        (tmp_path / ".ruby-version").write_text("3.0.6\n", encoding="utf-8")
        assert select_source(make_inputs(tmp_path)) == DeclarationSource.LOCKFILE

    def test_absent_default_lockfile_falls_through(self, tmp_path):
        (tmp_path / ".ruby-version").write_text("3.0.6\n", encoding="utf-8")
        assert select_source(make_inputs(tmp_path)) == DeclarationSource.RUBY_VERSION_FILE

    def test_explicit_lockfile_selected_even_if_absent(self, tmp_path):
        inputs = make_inputs(tmp_path, version_file="missing.lock", version_file_explicit=True)
        assert select_source(inputs) == DeclarationSource.LOCKFILE

    def test_ruby_version_before_tool_versions(self, tmp_path):
        (tmp_path / ".ruby-version").write_text("3.0.6\n", encoding="utf-8")
        (tmp_path / ".tool-versions").write_text("ruby 3.1.2\n", encoding="utf-8")
        inputs = make_inputs(tmp_path, version_file=None)
        assert select_source(inputs) == DeclarationSource.RUBY_VERSION_FILE

    def test_tool_versions_last(self, tmp_path):
        (tmp_path / ".tool-versions").write_text("ruby 3.1.2\n", encoding="utf-8")
        assert select_source(make_inputs(tmp_path)) == DeclarationSource.TOOL_VERSIONS_FILE

    def test_nothing_found(self, tmp_path):
        with pytest.raises(ConfigurationError, match="needs to be specified"):
            select_source(make_inputs(tmp_path))

    @pytest.mark.parametrize(
        "value,source",
        [
            (".ruby-version", DeclarationSource.RUBY_VERSION_FILE),
            (".tool-versions", DeclarationSource.TOOL_VERSIONS_FILE),
        ],
    )
    def test_explicit_file_name_selects_file(self, tmp_path, value, source):
        assert select_source(make_inputs(tmp_path, ruby_version=value)) == source


class TestParseDeclaration:
    """Test end-to-end declaration parsing against files on disk."""

    def test_explicit_input(self, tmp_path):
        spec, source = parse_declaration(make_inputs(tmp_path, ruby_version="jruby-9.4"))
        assert spec == VersionSpec(engine="jruby", version_prefix="9.4")
        assert source == DeclarationSource.EXPLICIT

    def test_lockfile(self, tmp_path):
        (tmp_path / "Gemfile.lock").write_text(
            "GEM\n  specs:\n\nRUBY VERSION\n   3.1.2p20\n\nBUNDLED WITH\n   2.3.7\n",
            encoding="utf-8",
        )
        spec, source = parse_declaration(make_inputs(tmp_path))
        assert spec == VersionSpec(engine="ruby", version_prefix="3.1.2")
        assert source == DeclarationSource.LOCKFILE

    def test_custom_lockfile_name(self, tmp_path):
        (tmp_path / "gems.locked").write_text("RUBY VERSION\n   3.2.2\n", encoding="utf-8")
        inputs = make_inputs(tmp_path, version_file="gems.locked", version_file_explicit=True)
        spec, _ = parse_declaration(inputs)
        assert spec.version_prefix == "3.2.2"

    def test_lockfile_without_header(self, tmp_path):
        (tmp_path / "Gemfile.lock").write_text("GEM\n  specs:\n", encoding="utf-8")
        with pytest.raises(MalformedDeclarationError):
            parse_declaration(make_inputs(tmp_path))

    def test_missing_explicit_lockfile(self, tmp_path):
        inputs = make_inputs(tmp_path, version_file="missing.lock", version_file_explicit=True)
        with pytest.raises(DeclarationFileNotFoundError):
            parse_declaration(inputs)

    def test_missing_explicit_lockfile_is_file_not_found(self, tmp_path):
        inputs = make_inputs(tmp_path, version_file="missing.lock", version_file_explicit=True)
        with pytest.raises(FileNotFoundError):
            parse_declaration(inputs)

    def test_ruby_version_file(self, tmp_path, caplog):
        (tmp_path / ".ruby-version").write_text("  3.1.2\n", encoding="utf-8")
        with caplog.at_level(logging.INFO):
            spec, source = parse_declaration(make_inputs(tmp_path))
        assert spec == VersionSpec(engine="ruby", version_prefix="3.1.2")
        assert source == DeclarationSource.RUBY_VERSION_FILE
        assert "Using 3.1.2 as input from file .ruby-version" in caplog.text

    def test_ruby_version_file_with_engine(self, tmp_path):
        (tmp_path / ".ruby-version").write_text("truffleruby\n", encoding="utf-8")
        spec, _ = parse_declaration(make_inputs(tmp_path))
        assert spec == VersionSpec(engine="truffleruby", version_prefix="")

    def test_empty_ruby_version_file(self, tmp_path):
        (tmp_path / ".ruby-version").write_text("\n", encoding="utf-8")
        with pytest.raises(MalformedDeclarationError):
            parse_declaration(make_inputs(tmp_path))

    def test_tool_versions_file(self, tmp_path):
        (tmp_path / ".tool-versions").write_text("nodejs 16.0.0\nruby 3.1.2\n", encoding="utf-8")
        spec, source = parse_declaration(make_inputs(tmp_path))
        assert spec == VersionSpec(engine="ruby", version_prefix="3.1.2")
        assert source == DeclarationSource.TOOL_VERSIONS_FILE

    def test_tool_versions_without_ruby(self, tmp_path):
        (tmp_path / ".tool-versions").write_text("nodejs 16.0.0\n", encoding="utf-8")
        with pytest.raises(MalformedDeclarationError):
            parse_declaration(make_inputs(tmp_path))

    def test_explicitly_named_file_missing(self, tmp_path):
        inputs = make_inputs(tmp_path, ruby_version=".ruby-version")
        with pytest.raises(DeclarationFileNotFoundError):
            parse_declaration(inputs)

    @pytest.mark.parametrize(
        "name,content",
        [
            (".ruby-version", b"3.1\xff\n"),
            (".tool-versions", b"ruby 3.1\xff\n"),
            ("Gemfile.lock", b"RUBY VERSION\n   3.1.2\xff\n"),
        ],
    )
    def test_non_utf8_file_is_malformed(self, tmp_path, name, content):
        (tmp_path / name).write_bytes(content)
        with pytest.raises(MalformedDeclarationError, match="not valid UTF-8"):
            parse_declaration(make_inputs(tmp_path))

    def test_explicitly_named_tool_versions(self, tmp_path):
        (tmp_path / ".tool-versions").write_text("ruby jruby-9.4.2.0\n", encoding="utf-8")
        spec, source = parse_declaration(make_inputs(tmp_path, ruby_version=".tool-versions"))
        assert spec == VersionSpec(engine="jruby", version_prefix="9.4.2.0")
        assert source == DeclarationSource.TOOL_VERSIONS_FILE
