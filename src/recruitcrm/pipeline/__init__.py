"""Candidate pipeline: stage moves, edits and hiring."""

from recruitcrm.pipeline.stage_machine import (
    HireError,
    PipelineStageMachine,
    title_case,
)

__all__ = [
    "HireError",
    "PipelineStageMachine",
    "title_case",
]
