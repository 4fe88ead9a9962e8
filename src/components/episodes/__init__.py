"""
Episodes component - Episode lifecycle and overlap validation.
"""

from ._impl import EpisodeConfig, EpisodeLifecycleService, validate_identifiers
from ._overlap import conflicts, find_conflict, intervals_overlap
from .component import (
    run,
    run_delete,
    run_edit,
    run_end,
    run_get,
    run_list,
    run_start,
)
from .models import (
    DeleteEpisodeInput,
    DeleteOutput,
    EditEpisodeInput,
    EndEpisodeInput,
    EpisodeError,
    EpisodeListOutput,
    EpisodeOutput,
    ErrorKind,
    GetEpisodeInput,
    ListEpisodesInput,
    StartEpisodeInput,
)
from .ports import (
    ConcurrentWriteError,
    EpisodeRepoPort,
    EpisodeUnitOfWorkPort,
    TimePort,
    UnitOfWorkFactory,
)

__all__ = [
    # Entry points
    "run",
    "run_start",
    "run_end",
    "run_edit",
    "run_delete",
    "run_get",
    "run_list",
    # Input models
    "StartEpisodeInput",
    "EndEpisodeInput",
    "EditEpisodeInput",
    "DeleteEpisodeInput",
    "GetEpisodeInput",
    "ListEpisodesInput",
    # Output models
    "EpisodeOutput",
    "DeleteOutput",
    "EpisodeListOutput",
    "EpisodeError",
    "ErrorKind",
    # Ports
    "ConcurrentWriteError",
    "EpisodeRepoPort",
    "EpisodeUnitOfWorkPort",
    "TimePort",
    "UnitOfWorkFactory",
    # Overlap validation
    "conflicts",
    "find_conflict",
    "intervals_overlap",
    # Service
    "EpisodeConfig",
    "EpisodeLifecycleService",
    "validate_identifiers",
]
