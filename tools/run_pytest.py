"""Run the blogview test suite with the project virtualenv's interpreter when present."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def _venv_python(root: Path) -> Path | None:
    scripts_dir = "Scripts" if os.name == "nt" else "bin"
    executable = "python.exe" if os.name == "nt" else "python"
    candidate = root / ".venv" / scripts_dir / executable
    return candidate if candidate.exists() else None


def main(argv: list[str] | None = None) -> int:
    root = Path(__file__).resolve().parents[1]
    python = str(_venv_python(root) or sys.executable)
    cmd = [python, "-m", "pytest", "-q", "tests", *(argv or [])]
    return subprocess.call(cmd, cwd=root)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
