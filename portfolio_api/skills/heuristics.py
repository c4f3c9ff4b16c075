from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

_HEURISTICS_PATH = Path(__file__).with_name("heuristics.yaml")

_LIST_FIELDS = (
    "name_fields",
    "score_fields",
    "deep_score_fields",
    "skill_key_markers",
    "structural_keys",
)


def _normalize_key(key: Any) -> str:
    return str(key).strip().lower()


@dataclass(frozen=True)
class SkillHeuristics:
    """Lookup tables that decide which JSON fields carry skill names and scores."""

    name_fields: tuple[str, ...]
    score_fields: tuple[str, ...]
    deep_score_fields: frozenset[str]
    skill_key_markers: tuple[str, ...]
    skill_key_fallback_marker: str
    structural_keys: frozenset[str]
    skill_order: Mapping[str, int]

    def looks_like_skill_name(self, key: Any) -> bool:
        """Return True when a mapping key itself reads like a skill category.

        Structural keys are rejected before any marker is considered.
        """
        normalized = _normalize_key(key)
        if not normalized:
            return False
        if normalized in self.structural_keys:
            return False
        if any(marker in normalized for marker in self.skill_key_markers):
            return True
        return bool(self.skill_key_fallback_marker) and self.skill_key_fallback_marker in normalized

    def is_score_key(self, key: Any) -> bool:
        return _normalize_key(key) in self.deep_score_fields

    def skill_order_rank(self, name: str) -> int | None:
        return self.skill_order.get(name.strip().lower())


def _require_string_list(parsed: dict[str, Any], field: str, path: Path) -> list[str]:
    values = parsed.get(field)
    if not isinstance(values, list) or not all(isinstance(item, str) for item in values):
        raise RuntimeError(f"Invalid skill heuristics '{path}': '{field}' must be a list of strings.")
    return values


def load_skill_heuristics(path: str | Path | None = None) -> SkillHeuristics:
    """Load heuristic tables from YAML; raises RuntimeError on a missing or malformed file."""
    source = Path(path) if path else _HEURISTICS_PATH
    if not source.exists():
        raise RuntimeError(f"Skill heuristics not found at '{source}'.")

    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read skill heuristics '{source}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in skill heuristics '{source}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid skill heuristics '{source}': expected a top-level mapping.")

    lists = {field: _require_string_list(parsed, field, source) for field in _LIST_FIELDS}

    fallback = parsed.get("skill_key_fallback_marker", "")
    if not isinstance(fallback, str):
        raise RuntimeError(f"Invalid skill heuristics '{source}': 'skill_key_fallback_marker' must be a string.")

    order = parsed.get("skill_order") or {}
    if not isinstance(order, dict) or not all(isinstance(rank, int) for rank in order.values()):
        raise RuntimeError(f"Invalid skill heuristics '{source}': 'skill_order' must map names to integers.")

    return SkillHeuristics(
        name_fields=tuple(lists["name_fields"]),
        score_fields=tuple(lists["score_fields"]),
        deep_score_fields=frozenset(_normalize_key(item) for item in lists["deep_score_fields"]),
        skill_key_markers=tuple(_normalize_key(item) for item in lists["skill_key_markers"] if item.strip()),
        skill_key_fallback_marker=_normalize_key(fallback),
        structural_keys=frozenset(_normalize_key(item) for item in lists["structural_keys"]),
        skill_order=MappingProxyType({_normalize_key(name): rank for name, rank in order.items()}),
    )


@lru_cache(maxsize=1)
def default_skill_heuristics() -> SkillHeuristics:
    return load_skill_heuristics()
