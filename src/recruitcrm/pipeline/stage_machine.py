"""Candidate pipeline stage machine.

Candidates move between the intake, screening and onboarding stages in
either direction. Each stage remembers the appointment fields an entity
had when it last left that stage, so that moving back restores them.

All operations are copy-on-write: they take a PipelineBoard and return a
new one, leaving the input untouched.
"""

import logging
import re
import uuid
from dataclasses import replace
from typing import Optional

from recruitcrm.domain.models import (
    PipelineBoard,
    PipelineEntity,
    Recruiter,
    Role,
    Stage,
    StageSnapshot,
)

logger = logging.getLogger(__name__)

CREW_CODE_PATTERN = re.compile(r"^\d{5}$")

# Fields callers may change through edit().
EDITABLE_FIELDS = frozenset(
    {"name", "phone", "email", "source", "calls", "date", "time", "comment"}
)


class HireError(ValueError):
    """Raised when a candidate cannot be hired."""


def title_case(name: str) -> str:
    """``"jane van DAM" -> "Jane Van Dam"``, collapsing whitespace."""
    return " ".join(part[:1].upper() + part[1:].lower() for part in name.split())


class PipelineStageMachine:
    """Moves pipeline entities between stages with per-stage memory.

    Misuse of move() (unknown entity, or same source and target stage) is
    logged and returns the board unchanged.

    Example:
        >>> machine = PipelineStageMachine()
        >>> board = machine.add_lead(PipelineBoard(), lead)
        >>> board = machine.move(board, lead.id, Stage.INTAKE, Stage.SCREENING)
        >>> board, recruiter = machine.hire(board, lead.id, "12345")
    """

    def move(
        self,
        board: PipelineBoard,
        entity_id: str,
        from_stage: Stage,
        to_stage: Stage,
    ) -> PipelineBoard:
        """Move an entity from one stage to another.

        The entity's date/time/comment are snapshotted for ``from_stage``
        and replaced by whatever was remembered for ``to_stage``. Without
        memory the date and time are cleared. A blank comment never
        overwrites a remembered or current one.

        Args:
            board: Current board.
            entity_id: Entity to move.
            from_stage: Stage the entity is expected to be in.
            to_stage: Destination stage.

        Returns:
            The new board, or ``board`` itself when the move is invalid.
        """
        from_stage, to_stage = Stage(from_stage), Stage(to_stage)
        if from_stage is to_stage:
            logger.warning("Ignoring move of %s within %s", entity_id, from_stage.value)
            return board

        entity = board.find(entity_id, from_stage)
        if entity is None:
            logger.warning(
                "Ignoring move of %s: not in %s", entity_id, from_stage.value
            )
            return board

        memory = dict(board.stage_memory)
        previous = memory.get((entity_id, from_stage))
        memory[(entity_id, from_stage)] = StageSnapshot(
            date=entity.date,
            time=entity.time,
            comment=entity.comment or (previous.comment if previous else ""),
        )

        restored = memory.get((entity_id, to_stage))
        if restored is not None:
            moved = replace(
                entity,
                date=restored.date,
                time=restored.time,
                comment=restored.comment or entity.comment,
            )
        else:
            moved = replace(entity, date="", time="")

        stages = dict(board.stages)
        stages[from_stage] = tuple(
            e for e in board.entities(from_stage) if e.id != entity_id
        )
        stages[to_stage] = board.entities(to_stage) + (moved,)

        logger.debug(
            "Moved %s from %s to %s", entity_id, from_stage.value, to_stage.value
        )
        return PipelineBoard(stages=stages, stage_memory=memory)

    def add_lead(self, board: PipelineBoard, entity: PipelineEntity) -> PipelineBoard:
        """Put a new entity at the top of the intake stage."""
        if board.locate(entity.id) is not None:
            logger.warning("Ignoring duplicate lead %s", entity.id)
            return board
        stages = dict(board.stages)
        stages[Stage.INTAKE] = (entity,) + board.entities(Stage.INTAKE)
        return PipelineBoard(stages=stages, stage_memory=dict(board.stage_memory))

    def edit(
        self,
        board: PipelineBoard,
        entity_id: str,
        stage: Stage,
        **changes,
    ) -> PipelineBoard:
        """Change contact or scheduling fields of an entity in place.

        Raises:
            ValueError: If a field name is not editable.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit fields: {', '.join(sorted(unknown))}")

        stage = Stage(stage)
        if board.find(entity_id, stage) is None:
            logger.warning("Ignoring edit of %s: not in %s", entity_id, stage.value)
            return board

        stages = dict(board.stages)
        stages[stage] = tuple(
            replace(e, **changes) if e.id == entity_id else e
            for e in board.entities(stage)
        )
        return PipelineBoard(stages=stages, stage_memory=dict(board.stage_memory))

    def remove(self, board: PipelineBoard, entity_id: str, stage: Stage) -> PipelineBoard:
        """Delete an entity and everything remembered about it."""
        stage = Stage(stage)
        if board.find(entity_id, stage) is None:
            logger.warning("Ignoring removal of %s: not in %s", entity_id, stage.value)
            return board
        return self._without(board, entity_id, stage)

    def hire(
        self,
        board: PipelineBoard,
        entity_id: str,
        crew_code: str,
        recruiter_id: Optional[str] = None,
    ) -> tuple[PipelineBoard, Recruiter]:
        """Turn an onboarding candidate into a Rookie recruiter.

        Args:
            board: Current board.
            entity_id: Candidate to hire; must be in the onboarding stage.
            crew_code: Exactly five digits (surrounding whitespace ignored).
            recruiter_id: ID for the new recruiter; generated when omitted.

        Returns:
            The board without the candidate, and the new recruiter.

        Raises:
            HireError: If the crew code is malformed or the candidate is not
                in onboarding.
        """
        code = str(crew_code or "").strip()
        if not CREW_CODE_PATTERN.match(code):
            raise HireError(f"Crew code must be exactly 5 digits, got {crew_code!r}")

        entity = board.find(entity_id, Stage.ONBOARDING)
        if entity is None:
            raise HireError(f"Candidate {entity_id} is not in {Stage.ONBOARDING.label}")

        recruiter = Recruiter(
            id=recruiter_id or uuid.uuid4().hex,
            name=title_case(entity.name),
            role=Role.ROOKIE,
            crew_code=code,
            phone=entity.phone,
            email=entity.email,
            source=entity.source,
        )
        logger.info("Hired %s as %s (crew %s)", entity.name, recruiter.id, code)
        return self._without(board, entity_id, Stage.ONBOARDING), recruiter

    def _without(self, board: PipelineBoard, entity_id: str, stage: Stage) -> PipelineBoard:
        stages = dict(board.stages)
        stages[stage] = tuple(e for e in board.entities(stage) if e.id != entity_id)
        memory = {
            key: snap for key, snap in board.stage_memory.items() if key[0] != entity_id
        }
        return PipelineBoard(stages=stages, stage_memory=memory)
