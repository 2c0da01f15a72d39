"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

from pagefinder.index.search import DEFAULT_MIN_SCORE, DEFAULT_TOP_K
from pagefinder.index.storage import DEFAULT_MAX_INDEXES

ENV_PREFIX = "PAGEFINDER_"


def _split_origins(value: str) -> Tuple[str, ...]:
    return tuple(origin.strip() for origin in value.split(",") if origin.strip())


_ENV_FIELDS: Dict[str, Callable[[str], Any]] = {
    "max_indexes": int,
    "top_k": int,
    "min_score": float,
    "snippet_chars": int,
    "upload_dir": Path,
    "max_upload_bytes": int,
    "client_origins": _split_origins,
}


@dataclass(slots=True)
class AppConfig:
    max_indexes: int = DEFAULT_MAX_INDEXES
    top_k: int = DEFAULT_TOP_K
    min_score: float = DEFAULT_MIN_SCORE
    snippet_chars: int = 500
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = 100 * 1024 * 1024
    client_origins: Tuple[str, ...] = ("http://localhost:3000",)

    def __post_init__(self) -> None:
        if self.max_indexes < 1:
            raise ValueError("max_indexes must be at least 1")
        if self.top_k < 1:
            raise ValueError("top_k must be at least 1")
        if self.snippet_chars < 0:
            raise ValueError("snippet_chars must not be negative")
        self.upload_dir = Path(self.upload_dir)
        self.client_origins = tuple(self.client_origins)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Build a config, overriding defaults with ``PAGEFINDER_*`` variables."""
        env = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for field_name, convert in _ENV_FIELDS.items():
            name = ENV_PREFIX + field_name.upper()
            raw = env.get(name, "").strip()
            if not raw:
                continue
            try:
                overrides[field_name] = convert(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
        return cls(**overrides)

    def resolve_upload_dir(self, base_dir: Path | None = None) -> Path:
        if self.upload_dir.is_absolute() or base_dir is None:
            return self.upload_dir
        return base_dir / self.upload_dir
