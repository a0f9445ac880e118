from __future__ import annotations

import os
import sys
from pathlib import Path


def pytest_configure() -> None:
    # `import src...` resolves from the repo root without an editable install.
    repo_root = str(Path(__file__).resolve().parents[1])
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)
    # Unit tests never talk to the real upstream.
    os.environ.setdefault("UPSTREAM_VALIDATE_ON_STARTUP", "false")
    os.environ.pop("CORS_ALLOW_ORIGINS", None)
