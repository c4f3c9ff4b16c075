from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from portfolio_api.schemas.portfolio import SiteData

logger = logging.getLogger(__name__)


def load_site_data(path: str | Path) -> SiteData:
    source = Path(path)
    if not source.exists():
        logger.info("site_data_missing path=%s; using defaults", source)
        return SiteData()
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
        return SiteData.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning("site_data_load_failed path=%s: %s", source, exc)
        return SiteData()
