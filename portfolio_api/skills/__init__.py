from .heuristics import SkillHeuristics, default_skill_heuristics, load_skill_heuristics
from .humanize import humanize_skill_name
from .matrix import RawNode, SkillCandidate, as_number, normalize_skill_matrix

__all__ = [
    "RawNode",
    "SkillCandidate",
    "SkillHeuristics",
    "as_number",
    "default_skill_heuristics",
    "humanize_skill_name",
    "load_skill_heuristics",
    "normalize_skill_matrix",
]
