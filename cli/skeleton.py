"""Templates for the files written next to a built project."""

from pathlib import Path
from typing import Dict

from common.constants import CACHE_TTL_MS, CHUNK_SIZE_BYTES, DEFAULT_PORT

PACKAGE_REQUIREMENT = "unity-lfs-bypasser>=1.0.0"

GITIGNORE = """__pycache__/
*.py[cod]
*.log
.env
.venv/
.DS_Store
"""

APP_PY = '''"""Launcher for the chunk-aware build server."""

import os
import sys

from server.main import main

if __name__ == "__main__":
    root = os.path.dirname(os.path.abspath(__file__))
    main(sys.argv[1:] + [
        "--public-dir", os.path.join(root, "public"),
        "--chunks-dir", os.path.join(root, "chunks"),
    ])
'''


def render_requirements() -> str:
    """Requirements file for the generated project."""
    return f"{PACKAGE_REQUIREMENT}\n"


def render_readme(project_name: str) -> str:
    """
    Human-readable instructions for the generated project.

    Args:
        project_name: Name of the output directory
    """
    chunk_mb = CHUNK_SIZE_BYTES // (1024 * 1024)
    ttl_minutes = CACHE_TTL_MS // 60000
    return f"""# {project_name}

WebGL build server with large-file chunking, so the build can be committed
without Git LFS.

## What this project contains

- **public/**: the build files
- **chunks/**: {chunk_mb} MB chunks and a manifest for every large file
- **app.py**: server that reassembles chunked files on demand
- **requirements.txt**: Python dependencies

## How to run

1. Install dependencies:
   ```bash
   pip install -r requirements.txt
   ```

2. Start the server:
   ```bash
   python app.py
   ```

   Or on a custom port:
   ```bash
   python app.py 8080
   ```

3. Open http://localhost:{DEFAULT_PORT} (or your custom port).

## How it works

- Large files are split into {chunk_mb} MB chunks with a SHA-256 manifest
- When a browser requests a chunked file, the server reassembles and verifies it
- Reassembled files are cached in memory for {ttl_minutes} minutes
- A chunk set that fails verification is never served; the request gets a 404

Set the `PORT` environment variable if your hosting platform requires it.
"""


def skeleton_files(project_name: str) -> Dict[str, str]:
    """Map of relative file name to content for the project skeleton."""
    return {
        "requirements.txt": render_requirements(),
        "README.md": render_readme(project_name),
        ".gitignore": GITIGNORE,
        "app.py": APP_PY,
    }


def write_skeleton(output_dir: Path) -> None:
    """
    Write the project skeleton files into output_dir.

    Raises:
        OSError: If a file cannot be written
    """
    for name, content in skeleton_files(output_dir.name).items():
        (output_dir / name).write_text(content, encoding="utf-8")
