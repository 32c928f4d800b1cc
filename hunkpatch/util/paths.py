import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """Create `path` and any missing parents; return it unchanged."""

    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory %s", path)
    return path
