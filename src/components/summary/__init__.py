"""
Summary component - Period summaries of episodes.
"""

from ._impl import SummaryConfig, aggregate, format_summary
from .component import run, run_summarise
from .models import PeriodSummary, SummariseInput, SummaryOutput
from .ports import EpisodeReaderPort

__all__ = [
    # Entry points
    "run",
    "run_summarise",
    # Models
    "SummariseInput",
    "PeriodSummary",
    "SummaryOutput",
    # Ports
    "EpisodeReaderPort",
    # Core
    "SummaryConfig",
    "aggregate",
    "format_summary",
]
