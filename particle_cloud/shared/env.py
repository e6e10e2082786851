"""Environment helpers for resolving Docker-style secret files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def load_secret_file_variables(suffix: str = "_FILE") -> None:
    """
    Expose the contents of ``KEY_FILE`` variables as ``KEY``.

    Lets the access token live in a mounted secret
    (``PARTICLE_ACCESS_TOKEN_FILE=/run/secrets/particle_token``). A variable
    that is already set wins over its file. Unreadable files are logged and
    skipped.
    """

    for key, file_path in list(os.environ.items()):
        if not key.endswith(suffix):
            continue
        target_key = key[: -len(suffix)]
        if not target_key or os.environ.get(target_key):
            continue
        if not file_path:
            continue
        try:
            value = Path(file_path).read_text(encoding="utf-8").strip()
            os.environ[target_key] = value
        except FileNotFoundError as exc:
            logger.warning(
                "env.secret_file.missing",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
        except UnicodeDecodeError as exc:
            logger.warning(
                "env.secret_file.decode_failed",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
        except OSError as exc:
            logger.warning(
                "env.secret_file.load_failed",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
