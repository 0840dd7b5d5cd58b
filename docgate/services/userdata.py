# docgate/services/userdata.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from docgate.errors import FileIOError

SUBDIRS = (
    ("templates", "documents"),
    ("templates", "export"),
    ("styles",),
    ("themes",),
)

STYLES_FILE = ("styles", "text-styles.json")


@dataclass
class UserDataService:
    """
    Application-private data root (one of the sandbox roots):
      <data_dir>/templates/{documents,export}, styles/, themes/
    """
    data_dir: Path

    def path(self) -> str:
        return str(self.data_dir)

    def init(self) -> str:
        try:
            for parts in SUBDIRS:
                self.data_dir.joinpath(*parts).mkdir(parents=True, exist_ok=True)

            styles_file = self.data_dir.joinpath(*STYLES_FILE)
            if not styles_file.exists():
                default_styles = {"version": "1.0.0", "styles": [], "custom_styles": []}
                styles_file.write_text(json.dumps(default_styles, indent=2), encoding="utf-8")
        except OSError as e:
            raise FileIOError.from_os_error("initialize user data directory", e) from e
        return "OK"
