"""Prompt template loading and formatting utilities."""

import re
from pathlib import Path

import yaml
from pydantic import BaseModel

PROMPTS_DIR = Path(__file__).parent / "prompts"


class PromptData(BaseModel):
    """Validated prompt template loaded from YAML.

    Fields:
        version: Prompt version for A/B testing (e.g., "v1").
        system_prompt: System prompt text for the LLM.
        user_prompt_template: User prompt with {placeholders}.
    """

    version: str = "unknown"
    system_prompt: str
    user_prompt_template: str


def load_prompt(path: str | Path) -> PromptData:
    """Load prompt template from YAML file.

    Relative paths are resolved against the bundled prompts directory.

    Raises:
        FileNotFoundError: If the prompt file does not exist.
        ValidationError: If required keys are missing or invalid.
    """
    prompt_path = Path(path)
    if not prompt_path.is_absolute():
        prompt_path = PROMPTS_DIR / prompt_path
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_path}")

    with prompt_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return PromptData.model_validate(data)


_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def format_prompt(template: str, **values: str) -> str:
    """Substitute {placeholders} in a single pass.

    Values already injected are never re-scanned, so user text that
    contains braces is left intact. Unknown placeholders stay as-is.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return values.get(key, match.group(0))

    return _PLACEHOLDER_RE.sub(_replace, template)
