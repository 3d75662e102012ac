"""Prompt templates for itinerary generation.

Prompts live next to this module as editable Markdown files. Any of them can
be replaced at deploy time through ``ITINERARY_PROMPT_<NAME>``, which may hold
either a path to a file or the literal prompt text.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

__all__ = ["PromptTemplate", "load_prompt_template", "render_prompt"]

_PROMPT_ROOT = Path(__file__).resolve().parent
_ENV_PREFIX = "ITINERARY_PROMPT_"


def _resolve_override(name: str) -> str | None:
    override_value = os.getenv(_ENV_PREFIX + name.upper())
    if not override_value:
        return None

    override_path = Path(override_value)
    if override_path.is_file():
        return override_path.read_text(encoding="utf-8")
    return override_value


@dataclass(frozen=True)
class PromptTemplate:
    """A minimal string template helper using ``str.format`` semantics."""

    name: str
    text: str

    def format(self, **kwargs: Any) -> str:
        return self.text.format(**kwargs)


@lru_cache(maxsize=None)
def load_prompt_template(name: str) -> PromptTemplate:
    """Load ``<name>.md`` from the package, honouring environment overrides."""

    override = _resolve_override(name)
    if override is not None:
        return PromptTemplate(name, override)

    path = _PROMPT_ROOT / f"{name}.md"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return PromptTemplate(name, path.read_text(encoding="utf-8"))


def render_prompt(name: str, **kwargs: Any) -> str:
    return load_prompt_template(name).format(**kwargs)
