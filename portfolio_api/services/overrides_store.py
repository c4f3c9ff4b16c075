from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from portfolio_api.schemas.portfolio import RepoOverride

logger = logging.getLogger(__name__)


class OverrideStoreError(Exception):
    pass


class RepoOverrideStore:
    """Per-repo overrides persisted as one JSON object keyed by repo name."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._overrides: dict[str, RepoOverride] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, RepoOverride]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("repo_overrides_load_failed path=%s: %s", self._path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("repo_overrides_load_failed path=%s: expected a JSON object", self._path)
            return {}

        overrides: dict[str, RepoOverride] = {}
        for name, entry in raw.items():
            try:
                overrides[str(name)] = RepoOverride.model_validate(entry)
            except ValidationError as exc:
                logger.warning("repo_override_skipped name=%s: %s", name, exc)
        return overrides

    def _write(self, overrides: dict[str, RepoOverride]) -> None:
        payload = {name: item.model_dump(by_alias=True) for name, item in overrides.items()}
        body = json.dumps(payload, indent=2, ensure_ascii=False)
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self._path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(body)
                os.replace(tmp_name, self._path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise OverrideStoreError(f"Failed to write repo overrides '{self._path}': {exc}") from exc

    def get(self, name: str) -> RepoOverride | None:
        with self._lock:
            return self._overrides.get(name)

    def all(self) -> dict[str, RepoOverride]:
        with self._lock:
            return dict(self._overrides)

    def set(self, name: str, override: RepoOverride) -> None:
        with self._lock:
            updated = dict(self._overrides)
            updated[name] = override
            self._write(updated)
            self._overrides = updated
        logger.info("repo_overrides_saved name=%s count=%d", name, len(updated))
