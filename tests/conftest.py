from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Importing web_api builds the module-level app; keep its store out of the repo.
os.environ.setdefault(
    "CHIRPY_DB_PATH", str(Path(tempfile.mkdtemp(prefix="chirpy-tests-")) / "database.json")
)
os.environ.setdefault("JWT_SECRET", "test-secret")
