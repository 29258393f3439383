import sys
from pathlib import Path

# Make the src/ package and the test helpers importable when running from the repo root.
ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT / "src", Path(__file__).resolve().parent):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
