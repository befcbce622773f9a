"""Run the foliosite test suite with the project's interpreter.

Prefers an active virtual environment, then ``.venv`` in the repository root,
then the interpreter running this script. Extra arguments go to pytest.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _interpreter() -> str:
    bin_dir, name = ("Scripts", "python.exe") if os.name == "nt" else ("bin", "python")
    candidates = []
    active = os.environ.get("VIRTUAL_ENV")
    if active:
        candidates.append(Path(active) / bin_dir / name)
    candidates.append(ROOT / ".venv" / bin_dir / name)
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)
    return sys.executable


def main(argv: list[str] | None = None) -> int:
    args = list(argv or [])
    if not any(not arg.startswith("-") for arg in args):
        args.append(str(ROOT / "tests"))
    return subprocess.call([_interpreter(), "-m", "pytest", "-q", *args], cwd=ROOT)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
