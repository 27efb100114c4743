from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "exam_target": 100,
    "quick_quiz_size": 10,
    "allocation_floor": 8,
    "distractor_count": 3,
    "strict_allocation": False,
    "term_files": [],
    "accent_palette": [
        "#e85d04", "#2d6a4f", "#7209b7", "#0077b6",
        "#c77dff", "#f77f00", "#e63946", "#06a77d",
    ],
    "random_seed": None,
}


@dataclass
class Settings:
    exam_target: int = DEFAULTS["exam_target"]
    quick_quiz_size: int = DEFAULTS["quick_quiz_size"]
    allocation_floor: int = DEFAULTS["allocation_floor"]
    distractor_count: int = DEFAULTS["distractor_count"]
    strict_allocation: bool = DEFAULTS["strict_allocation"]
    term_files: list[str] = field(default_factory=lambda: list(DEFAULTS["term_files"]))
    accent_palette: list[str] = field(default_factory=lambda: list(DEFAULTS["accent_palette"]))
    random_seed: int | None = DEFAULTS["random_seed"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_dir(self) -> Path:
        return self.project_root / "data"

    def resolved_term_files(self) -> list[Path]:
        if self.term_files:
            root = self.project_root
            return [root / f for f in self.term_files]
        return sorted(self.data_dir.glob("*.md"))

    def to_dict(self) -> dict:
        return {
            "exam_target": self.exam_target,
            "quick_quiz_size": self.quick_quiz_size,
            "allocation_floor": self.allocation_floor,
            "distractor_count": self.distractor_count,
            "strict_allocation": self.strict_allocation,
            "term_files": self.term_files,
            "accent_palette": self.accent_palette,
            "random_seed": self.random_seed,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
