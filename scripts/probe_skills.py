from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import httpx

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_api.core.config import settings  # noqa: E402
from portfolio_api.services.tryhackme import fetch_tryhackme_json, thm_cookie_header  # noqa: E402
from portfolio_api.skills import load_skill_heuristics, normalize_skill_matrix  # noqa: E402


def _load_payload(args: argparse.Namespace):
    if args.file:
        return json.loads(Path(args.file).read_text(encoding="utf-8"))

    cookie = thm_cookie_header(settings.thm_cookie, settings.thm_session)
    with httpx.Client(timeout=settings.upstream_timeout_s, follow_redirects=True) as client:
        return fetch_tryhackme_json(
            client,
            f"{settings.thm_api_url}/users/skills",
            params={"role": args.role, "segment": args.segment},
            cookie=cookie,
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the normalized skill matrix for a skills payload.")
    parser.add_argument("--file", help="Read the skills payload from a JSON file instead of TryHackMe.")
    parser.add_argument("--role", default=settings.thm_skills_role, help="Skills role query parameter")
    parser.add_argument("--segment", default=settings.thm_skills_segment, help="Skills segment query parameter")
    parser.add_argument("--heuristics", help="Alternate heuristics YAML to test table changes.")
    parser.add_argument("--raw", action="store_true", help="Also print the raw payload.")
    args = parser.parse_args()

    payload = _load_payload(args)
    heuristics = load_skill_heuristics(args.heuristics) if args.heuristics else None
    matrix = normalize_skill_matrix(payload, heuristics)

    output = {"skillsMatrix": [skill.model_dump() for skill in matrix]}
    if args.raw:
        output["raw"] = payload
    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
