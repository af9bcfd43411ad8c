"""Best-effort reshaping of free-text provider replies.

Direct providers are called without structured-output support, so their
reply may be JSON (when the system prompt asked for it), JSON wrapped in
Markdown fences, or plain prose. ResponseNormalizer returns parsed JSON
when it can and otherwise synthesizes an object the calling capability
can consume. It never raises.
"""

import json
import re
from collections.abc import Mapping
from typing import Any

from study_bridge.llm.schemas import NormalizationTier, ProviderResponse, ShapeAdapter
from study_bridge.llm.shapes import FALLBACK_SHAPES, SUPERSET_KEYS

_FENCE_RE = re.compile(r"```(?:json)?")

# Opening characters accepted as JSON per tier.
_JSON_OPENERS: dict[NormalizationTier, tuple[str, ...]] = {
    NormalizationTier.FULL: ("{", "["),
    NormalizationTier.REDUCED: ("{",),
}


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


class ResponseNormalizer:
    """Turns raw provider text into a capability-shaped object.

    Args:
        shapes: Capability name -> fallback shape adapter.
            Defaults to FALLBACK_SHAPES.
    """

    def __init__(self, shapes: Mapping[str, ShapeAdapter] | None = None) -> None:
        self._shapes = dict(FALLBACK_SHAPES if shapes is None else shapes)

    @property
    def capabilities(self) -> list[str]:
        return list(self._shapes)

    def normalize(
        self,
        raw_text: str,
        tier: NormalizationTier = NormalizationTier.FULL,
        capability: str | None = None,
    ) -> ProviderResponse:
        """Parse JSON if present, otherwise synthesize a fallback shape.

        Args:
            raw_text: Provider reply text.
            tier: FULL for the primary direct path, REDUCED for rescue.
            capability: When registered, only that capability's shape
                is synthesized; otherwise the tier's superset.
        """
        parsed = self._parse_json(raw_text, tier)
        if parsed is not None:
            return parsed

        adapter = self._shapes.get(capability) if capability else None
        if adapter is not None:
            return adapter(raw_text, tier)
        return self._superset(raw_text, tier)

    @staticmethod
    def _parse_json(raw_text: str, tier: NormalizationTier) -> ProviderResponse | None:
        cleaned = strip_code_fences(raw_text)
        if not cleaned.startswith(_JSON_OPENERS[tier]):
            return None
        try:
            parsed: Any = json.loads(cleaned)
        except (ValueError, RecursionError):
            return None
        if isinstance(parsed, dict | list):
            return parsed
        return None

    def _superset(self, raw_text: str, tier: NormalizationTier) -> dict[str, Any]:
        """Merge every adapter's shape, keeping only the tier's keys."""
        keys = SUPERSET_KEYS[tier]
        merged: dict[str, Any] = {}
        for adapter in self._shapes.values():
            for key, value in adapter(raw_text, tier).items():
                if key in keys:
                    merged.setdefault(key, value)
        return merged


_default_normalizer = ResponseNormalizer()


def normalize(
    raw_text: str,
    tier: NormalizationTier = NormalizationTier.FULL,
    capability: str | None = None,
) -> ProviderResponse:
    """Module-level shortcut using the default adapter registry."""
    return _default_normalizer.normalize(raw_text, tier, capability)
