"""
Period marker component - exactly-once-per-period side effects.

A daily or monthly job asks to claim the current period before doing its
work. The marker lives in the store and is moved with compare-and-set, so
only one caller per period ever sees claimed=True, across processes and
restarts.
"""

from __future__ import annotations

import logging

from src.domain.timeutil import DEFAULT_PERIOD_FORMAT, period_for
from src.rules.models import Rules

from .models import ClaimOutput, ClaimPeriodInput, GetMarkerInput, MarkerOutput
from .ports import PeriodMarkerRepoPort, TimePort

logger = logging.getLogger(__name__)


def _period_format(rules: Rules | None) -> str:
    return rules.periods.format if rules is not None else DEFAULT_PERIOD_FORMAT


def run_claim(
    inp: ClaimPeriodInput,
    *,
    repo: PeriodMarkerRepoPort,
    time_port: TimePort,
    rules: Rules | None = None,
) -> ClaimOutput:
    """
    Claim a period for the named side effect.

    Args:
        inp: Marker name and optional explicit period.
        repo: Period marker repository port.
        time_port: Clock used for the default period and the claim timestamp.
        rules: Optional rules for the period format.

    Returns:
        ClaimOutput; claimed is False if the period was already claimed.
    """
    now = time_port.now_utc()
    period = inp.period or period_for(now, _period_format(rules))

    claimed = repo.compare_and_set(inp.name, period, now)
    if claimed:
        logger.info("Marker %s advanced to %s", inp.name, period)
    else:
        logger.debug("Marker %s already at %s", inp.name, period)

    return ClaimOutput(name=inp.name, period=period, claimed=claimed)


def run_get(inp: GetMarkerInput, *, repo: PeriodMarkerRepoPort) -> MarkerOutput:
    """Get the last claimed period for a marker."""
    return MarkerOutput(marker=repo.get(inp.name))
