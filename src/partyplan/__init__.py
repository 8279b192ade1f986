"""partyplan – supplier matching and budget allocation for party planning."""

from loguru import logger

__all__ = ["logger"]
