from __future__ import annotations

import math
from collections import deque
from typing import Any, Iterable, NamedTuple, Union

from portfolio_api.schemas.skills import Skill

from .heuristics import SkillHeuristics, default_skill_heuristics
from .humanize import humanize_skill_name

RawNode = Union[None, bool, int, float, str, list["RawNode"], dict[str, "RawNode"]]


class SkillCandidate(NamedTuple):
    name: str
    value: float


def as_number(value: Any) -> float | None:
    """Coerce JSON numbers and numeric strings; anything else (including bools) is rejected."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def pick_first_string_field(node: dict[str, Any], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = node.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def pick_first_numeric_field(node: dict[str, Any], keys: Iterable[str]) -> float | None:
    for key in keys:
        if key in node:
            number = as_number(node[key])
            if number is not None:
                return number
    return None


def pick_deep_numeric_field(node: RawNode, heuristics: SkillHeuristics) -> float | None:
    """Largest score-like value anywhere below ``node``, or None when nothing matches."""
    best: float | None = None
    stack: list[Any] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            for key, child in current.items():
                if heuristics.is_score_key(key):
                    number = as_number(child)
                    if number is not None and (best is None or number > best):
                        best = number
                if isinstance(child, (dict, list)):
                    stack.append(child)
        elif isinstance(current, list):
            stack.extend(current)
    return best


def _score_from_mapping(node: dict[str, Any], heuristics: SkillHeuristics) -> float | None:
    number = pick_first_numeric_field(node, heuristics.score_fields)
    if number is not None:
        return number
    return pick_deep_numeric_field(node, heuristics)


def _keyed_score(value: Any, heuristics: SkillHeuristics) -> float | None:
    if isinstance(value, dict):
        return _score_from_mapping(value, heuristics)
    return as_number(value)


def collect_skill_candidates(raw: RawNode, heuristics: SkillHeuristics) -> list[SkillCandidate]:
    candidates: list[SkillCandidate] = []
    queue: deque[Any] = deque([raw])

    while queue:
        node = queue.popleft()

        if isinstance(node, list):
            queue.extend(node)
            continue
        if not isinstance(node, dict):
            continue

        name = pick_first_string_field(node, heuristics.name_fields)
        if name is not None:
            value = _score_from_mapping(node, heuristics)
            if value is not None:
                candidates.append(SkillCandidate(humanize_skill_name(name), value))

        for key, child in node.items():
            if heuristics.looks_like_skill_name(key):
                value = _keyed_score(child, heuristics)
                if value is not None:
                    candidates.append(SkillCandidate(humanize_skill_name(str(key)), value))
                    continue
            if isinstance(child, (dict, list)):
                queue.append(child)

    return candidates


def dedupe_and_sort_skills(candidates: Iterable[SkillCandidate], heuristics: SkillHeuristics) -> list[Skill]:
    """Keep the highest value per case-insensitive name; equal values keep the first seen."""
    best: dict[str, SkillCandidate] = {}
    for candidate in candidates:
        name = candidate.name.strip()
        if not name:
            continue
        key = name.lower()
        current = best.get(key)
        if current is None or candidate.value > current.value:
            best[key] = SkillCandidate(name, candidate.value)

    def sort_key(item: SkillCandidate) -> tuple[bool, int, str]:
        rank = heuristics.skill_order_rank(item.name)
        if rank is None:
            return (True, 0, item.name)
        return (False, rank, "")

    ordered = sorted(best.values(), key=sort_key)
    return [Skill(name=item.name, value=item.value) for item in ordered]


def normalize_skill_matrix(raw: RawNode, heuristics: SkillHeuristics | None = None) -> list[Skill]:
    """Discover ``(name, value)`` skill scores in an arbitrarily shaped JSON document.

    Best effort: unrecognised shapes produce an empty list rather than an error.
    """
    if raw is None:
        return []
    tables = heuristics or default_skill_heuristics()
    candidates = collect_skill_candidates(raw, tables)
    if not candidates:
        return []
    return dedupe_and_sort_skills(candidates, tables)
