"""
Period marker component - exactly-once-per-period side effects.
"""

from .component import run_claim, run_get
from .models import ClaimOutput, ClaimPeriodInput, GetMarkerInput, MarkerOutput
from .ports import PeriodMarkerRepoPort, TimePort

__all__ = [
    # Entry points
    "run_claim",
    "run_get",
    # Models
    "ClaimPeriodInput",
    "GetMarkerInput",
    "ClaimOutput",
    "MarkerOutput",
    # Ports
    "PeriodMarkerRepoPort",
    "TimePort",
]
