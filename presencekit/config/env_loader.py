import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

log = logging.getLogger(__name__)

# checked in order; the first one found is loaded
ENV_FILES = (".env.local", ".env")


def load_env(cwd: Path = Path("."), env_file: Optional[str] = None) -> Optional[Path]:
    """Load bot settings (DISCORD_TOKEN, PRESENCE_*, LOG_LEVEL) from a dotenv file.

    ``PRESENCE_ENV_FILE`` (or ``env_file``) names the file explicitly. Values
    already present in the process environment always win, so a hosting
    dashboard stays the source of truth.
    """
    explicit = env_file or os.getenv("PRESENCE_ENV_FILE")
    if explicit:
        candidates = [Path(explicit)]
    else:
        candidates = [cwd / name for name in ENV_FILES]
    for path in candidates:
        if path.exists():
            load_dotenv(path, override=False)
            log.debug("[env] loaded %s", path)
            return path
    if explicit:
        log.warning("[env] PRESENCE_ENV_FILE %s not found", explicit)
    return None
