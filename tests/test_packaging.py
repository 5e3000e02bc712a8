"""Checks on the source tree and packaging metadata."""

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SOURCE_DIR = ROOT / "src" / "todosync"


class TestPackaging:
    def test_python_floor_covers_typing_features_in_use(self):
        # typing.TypeIs first shipped with 3.13
        project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]
        assert project["requires-python"] == ">=3.13"

    def test_every_module_starts_with_the_license_line(self):
        missing = [
            str(path.relative_to(SOURCE_DIR))
            for path in sorted(SOURCE_DIR.rglob("*.py"))
            if not path.read_text().startswith("# SPDX-License-Identifier: MIT\n")
        ]
        assert missing == []
