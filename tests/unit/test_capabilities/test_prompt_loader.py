"""Tests for prompt loading and formatting utilities."""

import re
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from study_bridge.capabilities.catalog import CAPABILITIES
from study_bridge.capabilities.prompt_loader import (
    PROMPTS_DIR,
    PromptData,
    format_prompt,
    load_prompt,
)


@pytest.fixture()
def valid_prompt_file(tmp_path: Path) -> Path:
    """Create a valid prompt YAML file."""
    data = {
        "version": "v1",
        "system_prompt": "You are a tutor.",
        "user_prompt_template": "Question: {question}",
    }
    path = tmp_path / "prompt.yaml"
    path.write_text(yaml.dump(data))
    return path


class TestLoadPrompt:
    def test_load_valid_prompt(self, valid_prompt_file: Path) -> None:
        data = load_prompt(valid_prompt_file)
        assert isinstance(data, PromptData)
        assert data.system_prompt == "You are a tutor."
        assert data.user_prompt_template == "Question: {question}"
        assert data.version == "v1"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_prompt(tmp_path / "nonexistent.yaml")

    def test_load_missing_system_prompt(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"user_prompt_template": "test"}))
        with pytest.raises(ValidationError):
            load_prompt(path)

    def test_load_default_version(self, tmp_path: Path) -> None:
        path = tmp_path / "no_version.yaml"
        path.write_text(yaml.dump({"system_prompt": "s", "user_prompt_template": "u"}))
        assert load_prompt(path).version == "unknown"

    def test_relative_path_resolves_to_bundled_prompts(self) -> None:
        data = load_prompt("summarizer.yaml")
        assert data == load_prompt(PROMPTS_DIR / "summarizer.yaml")


class TestFormatPrompt:
    def test_substitutes_placeholders(self) -> None:
        assert format_prompt("Q: {question}", question="why?") == "Q: why?"

    def test_unknown_placeholder_left_intact(self) -> None:
        assert format_prompt("{a} {b}", a="1") == "1 {b}"

    def test_injected_braces_not_rescanned(self) -> None:
        result = format_prompt("Text: {text}", text="use {text} and {x}", x="no")
        assert result == "Text: use {text} and {x}"

    def test_json_braces_in_template_kept(self) -> None:
        assert format_prompt('{"k": 1} {v}', v="2") == '{"k": 1} 2'


class TestBundledPrompts:
    @pytest.mark.parametrize("name", sorted(CAPABILITIES))
    def test_every_capability_has_a_prompt(self, name: str) -> None:
        data = load_prompt(CAPABILITIES[name].prompt_file)
        assert data.system_prompt
        assert data.user_prompt_template

    @pytest.mark.parametrize("name", sorted(CAPABILITIES))
    def test_placeholders_match_input_fields(self, name: str) -> None:
        definition = CAPABILITIES[name]
        template = load_prompt(definition.prompt_file).user_prompt_template
        placeholders = set(re.findall(r"\{(\w+)\}", template))
        fields = set(definition.input_model.model_fields) - {"provider", "model"}
        assert placeholders <= fields | {"context"}
