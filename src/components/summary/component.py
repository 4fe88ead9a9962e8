"""
Summary component - Period summaries of episodes.

Reads an owner's episodes for a period and reports how many were
completed and how long they lasted on average.
"""

from __future__ import annotations

import logging

from src.rules.models import Rules

from ._impl import SummaryConfig, aggregate
from .models import SummariseInput, SummaryOutput
from .ports import EpisodeReaderPort

logger = logging.getLogger(__name__)


def _build_config(rules: Rules | None) -> SummaryConfig:
    """Build summary config from rules."""
    if rules is None:
        return SummaryConfig()

    return SummaryConfig(
        episode_label=rules.summary.episode_label,
        decimals=rules.summary.decimals,
    )


def run_summarise(
    inp: SummariseInput,
    *,
    repo: EpisodeReaderPort,
    rules: Rules | None = None,
) -> SummaryOutput:
    """
    Summarise an owner's episodes in a period.

    An owner or period with no episodes is a valid state and produces a
    zero summary.

    Args:
        inp: Input containing owner and period.
        repo: Read-only episode store.
        rules: Optional rules for configuration.

    Returns:
        SummaryOutput with the period summary.
    """
    episodes = repo.list_for_owner_period(inp.owner, inp.period)
    summary = aggregate(inp.owner, inp.period, episodes, _build_config(rules))
    logger.debug(
        "Summarised owner=%s period=%s: count=%d open=%d",
        inp.owner,
        inp.period,
        summary.count,
        summary.open_count,
    )
    return SummaryOutput(summary=summary)


def run(
    inp: SummariseInput,
    *,
    repo: EpisodeReaderPort,
    rules: Rules | None = None,
) -> SummaryOutput:
    """Main entry point for the summary component."""
    if isinstance(inp, SummariseInput):
        return run_summarise(inp, repo=repo, rules=rules)
    raise ValueError(f"Unknown input type: {type(inp)}")
