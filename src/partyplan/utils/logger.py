import sys
from os.path import expanduser
from pathlib import Path

from loguru import logger


def _get_log_file_path() -> Path:
    home = expanduser("~")
    log_dir = Path(home) / ".partyplan" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "partyplan.log"


def setup_logger(verbose: bool = False) -> None:
    """Send logs to the rotating file, and to stderr as well when verbose."""
    logger.remove()
    logger.add(
        _get_log_file_path(), rotation="10 MB", retention="7 days", compression="zip"
    )
    if verbose:
        logger.add(sys.stderr, level="INFO", format="<level>{level: <8}</level> {message}")
