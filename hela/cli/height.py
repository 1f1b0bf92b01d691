"""
Consensus height to runtime round.
"""

from ..config import ParaTime
from ..constants import HEIGHT_LATEST, ROUND_LATEST
from ..logger import get_logger

logger = get_logger(__name__)


def resolve_round(consensus, paratime: ParaTime, height: int) -> int:
    """
    Runtime round to query for a requested consensus *height*.

    The latest height maps to the latest round without a network call.
    Any other height costs one GetLatestBlock lookup, whose errors are
    raised unchanged (public endpoints refuse historical heights).
    """
    if height == HEIGHT_LATEST:
        return ROUND_LATEST

    block = consensus.get_latest_block(paratime.namespace(), height)
    logger.debug("Height %d resolves to round %d", height, block.round)
    return block.round
