"""Tests for the relaxed JSON (JSONC) pass."""

import json

import pytest

from dotfiles_validator import jsonc


class TestIsRelaxed:

    @pytest.mark.parametrize("path", [
        "vscode/settings.jsonc",
        ".config/zed/settings.json",
        "dotfiles/.config/zed/keymap.json",
    ])
    def test_relaxed_paths(self, path):
        assert jsonc.is_relaxed(path)

    @pytest.mark.parametrize("path", [
        "package.json",
        ".config/karabiner/karabiner.json",
        ".config/zedlike/settings.json",
    ])
    def test_strict_paths(self, path):
        assert not jsonc.is_relaxed(path)


class TestStripComments:

    def test_line_and_block_comments(self):
        text = """{
  // full line comment
  "theme": "One Dark", // trailing comment
  /* block
     comment */
  "vim_mode": true
}"""
        assert json.loads(jsonc.strip_comments(text)) == {"theme": "One Dark", "vim_mode": True}

    def test_urls_inside_strings_survive(self):
        text = '{"url": "https://example.com/a//b", "glob": "/* not a comment */"}'

        assert json.loads(jsonc.strip_comments(text)) == {
            "url": "https://example.com/a//b",
            "glob": "/* not a comment */",
        }

    def test_trailing_commas_removed(self):
        text = '{"a": [1, 2, 3,], "b": {"c": 1,},}'

        assert json.loads(jsonc.strip_comments(text)) == {"a": [1, 2, 3], "b": {"c": 1}}

    def test_escaped_quote_in_string(self):
        text = '{"a": "say \\"hi\\" // still text"} // comment'

        assert json.loads(jsonc.strip_comments(text)) == {"a": 'say "hi" // still text'}


class TestLoads:

    def test_strict_json(self):
        assert jsonc.loads('{"a": 1}') == {"a": 1}

    def test_comments_stripped_even_when_not_relaxed(self):
        assert jsonc.loads('{"a": 1} // note') == {"a": 1}

    def test_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            jsonc.loads('{"a": }')

    def test_relaxed_still_raises_when_unparsable(self):
        with pytest.raises(ValueError):
            jsonc.loads("{ unquoted: keys }", relaxed=True)
