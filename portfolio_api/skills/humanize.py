from __future__ import annotations

_WORD_SEPARATORS = {"_", "-"}


def humanize_skill_name(value: str) -> str:
    """Turn an identifier such as ``incident_response`` or ``incidentResponse`` into ``Incident Response``."""
    raw = (value or "").strip()
    if not raw:
        return ""

    chars: list[str] = []
    prev_lower_or_digit = False
    for char in raw:
        if char in _WORD_SEPARATORS:
            chars.append(" ")
            prev_lower_or_digit = False
            continue
        if char.isupper() and prev_lower_or_digit:
            chars.append(" ")
        chars.append(char)
        prev_lower_or_digit = char.islower() or char.isdigit()

    words = "".join(chars).lower().split()
    return " ".join(word[0].upper() + word[1:] for word in words)
