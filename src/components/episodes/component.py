"""
Episodes component - Episode lifecycle management.

Tracks time-bounded episodes per owner and period.

Invariants:
- An owner's episodes never overlap within a period
- At most one open episode per owner and period
- duration present iff end present; duration = end - start in minutes
- Episode ids are never reused

Every entry point returns an output record; rejected requests carry
errors instead of raising.
"""

from __future__ import annotations

from src.rules.models import Rules

from ._impl import EpisodeConfig, EpisodeLifecycleService
from .models import (
    DeleteEpisodeInput,
    DeleteOutput,
    EditEpisodeInput,
    EndEpisodeInput,
    EpisodeListOutput,
    EpisodeOutput,
    GetEpisodeInput,
    ListEpisodesInput,
    StartEpisodeInput,
)
from .ports import TimePort, UnitOfWorkFactory


def _build_config(rules: Rules | None) -> EpisodeConfig:
    """Build episode config from rules."""
    if rules is None:
        return EpisodeConfig()

    return EpisodeConfig(boundary_inclusive=rules.overlap.boundary_inclusive)


def _create_service(
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None,
    rules: Rules | None,
) -> EpisodeLifecycleService:
    """Create lifecycle service from ports."""
    return EpisodeLifecycleService(
        unit_of_work=unit_of_work,
        time_port=time_port,
        config=_build_config(rules),
    )


# --- Component Entry Points ---


def run_start(
    inp: StartEpisodeInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeOutput:
    """
    Start a new open episode.

    Args:
        inp: Input containing owner, start time and period.
        unit_of_work: Factory for episode store transactions.
        time_port: Optional time port for timestamps.
        rules: Optional rules for configuration.

    Returns:
        EpisodeOutput with the new episode or errors
        (invalid_input, overlap_conflict).
    """
    service = _create_service(unit_of_work, time_port, rules)
    episode, errors = service.start(inp.owner, inp.start_time, inp.period)
    return EpisodeOutput(episode=episode, errors=errors, success=len(errors) == 0)


def run_end(
    inp: EndEpisodeInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeOutput:
    """
    Close an open episode and compute its duration.

    Returns:
        EpisodeOutput with the closed episode or errors (not_found_or_not_owned,
        already_closed, invalid_ordering, overlap_conflict, invalid_input).
    """
    service = _create_service(unit_of_work, time_port, rules)
    episode, errors = service.end(inp.owner, inp.episode_id, inp.end_time)
    return EpisodeOutput(episode=episode, errors=errors, success=len(errors) == 0)


def run_edit(
    inp: EditEpisodeInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeOutput:
    """
    Overwrite an episode's interval; the episode ends up closed.

    Returns:
        EpisodeOutput with the edited episode or errors (not_found_or_not_owned,
        invalid_ordering, overlap_conflict, invalid_input).
    """
    service = _create_service(unit_of_work, time_port, rules)
    episode, errors = service.edit(inp.owner, inp.episode_id, inp.new_start, inp.new_end)
    return EpisodeOutput(episode=episode, errors=errors, success=len(errors) == 0)


def run_delete(
    inp: DeleteEpisodeInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> DeleteOutput:
    """Permanently delete an episode."""
    service = _create_service(unit_of_work, time_port, rules)
    deleted, errors = service.delete(inp.owner, inp.episode_id)
    return DeleteOutput(deleted=deleted, errors=errors, success=deleted)


def run_get(
    inp: GetEpisodeInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeOutput:
    """Get one of the owner's episodes."""
    service = _create_service(unit_of_work, time_port, rules)
    episode, errors = service.get(inp.owner, inp.episode_id)
    return EpisodeOutput(episode=episode, errors=errors, success=episode is not None)


def run_list(
    inp: ListEpisodesInput,
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeListOutput:
    """List the owner's episodes in a period, ordered by start."""
    service = _create_service(unit_of_work, time_port, rules)
    episodes = service.list_episodes(inp.owner, inp.period)
    return EpisodeListOutput(episodes=tuple(episodes), total=len(episodes))


def run(
    inp: (
        StartEpisodeInput
        | EndEpisodeInput
        | EditEpisodeInput
        | DeleteEpisodeInput
        | GetEpisodeInput
        | ListEpisodesInput
    ),
    *,
    unit_of_work: UnitOfWorkFactory,
    time_port: TimePort | None = None,
    rules: Rules | None = None,
) -> EpisodeOutput | DeleteOutput | EpisodeListOutput:
    """
    Main entry point for the episodes component.

    Dispatches to appropriate handler based on input type.
    """
    kwargs = {"unit_of_work": unit_of_work, "time_port": time_port, "rules": rules}
    if isinstance(inp, StartEpisodeInput):
        return run_start(inp, **kwargs)  # type: ignore[arg-type]
    elif isinstance(inp, EndEpisodeInput):
        return run_end(inp, **kwargs)  # type: ignore[arg-type]
    elif isinstance(inp, EditEpisodeInput):
        return run_edit(inp, **kwargs)  # type: ignore[arg-type]
    elif isinstance(inp, DeleteEpisodeInput):
        return run_delete(inp, **kwargs)  # type: ignore[arg-type]
    elif isinstance(inp, GetEpisodeInput):
        return run_get(inp, **kwargs)  # type: ignore[arg-type]
    elif isinstance(inp, ListEpisodesInput):
        return run_list(inp, **kwargs)  # type: ignore[arg-type]
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
