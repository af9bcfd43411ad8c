"""AI-assisted study capabilities served through the provider bridge."""

from study_bridge.capabilities.catalog import CAPABILITIES, CapabilityDefinition
from study_bridge.capabilities.prompt_loader import (
    PromptData,
    format_prompt,
    load_prompt,
)
from study_bridge.capabilities.runner import CapabilityRunner, PreparedPrompt

__all__ = [
    "CAPABILITIES",
    "CapabilityDefinition",
    "CapabilityRunner",
    "PreparedPrompt",
    "PromptData",
    "format_prompt",
    "load_prompt",
]
