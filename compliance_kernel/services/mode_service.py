"""
ModeService -- compliance mode resolution and seeding.

Responsibility:
    Resolves a mode id or user-typed mode name to its quota, and seeds the
    configured modes into an empty database.

Architecture position:
    Kernel > Services -- imperative shell.  Called by RunService before a
    run transaction opens and by the CLI at start-up.

Failure modes:
    - ModeNotFoundError: no mode with the given id or name.
    - InvalidModeNameError: a name that is not a recognised ratio.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from compliance_kernel.domain.types import ModeInfo
from compliance_kernel.exceptions import InvalidModeNameError, ModeNotFoundError
from compliance_kernel.logging_config import get_logger
from compliance_kernel.models.mode import Mode
from compliance_kernel.selectors.mode_selector import ModeSelector
from compliance_kernel.services.base import BaseService

logger = get_logger("services.mode_service")

_MODE_ALIASES = {
    "2to1": "2To1",
    "2": "2To1",
    "3to1": "3To1",
    "3": "3To1",
}


def normalize_mode_name(mode_name: str | None) -> str:
    """
    Canonicalise a user-typed mode name.

    ``"2to1"``, ``"2TO1"`` and ``"2"`` all become ``"2To1"``; likewise for 3.

    Raises:
        InvalidModeNameError: for anything else.
    """
    canonical = _MODE_ALIASES.get(str(mode_name or "").strip().lower())
    if canonical is None:
        raise InvalidModeNameError(mode_name)
    return canonical


class ModeService(BaseService):
    """Mode lookups that raise on absence, plus idempotent seeding."""

    def __init__(self, session):
        super().__init__(session)
        self._selector = ModeSelector(session)

    def get_mode_by_id(self, mode_id: int) -> ModeInfo:
        mode = self._selector.get_mode_by_id(mode_id)
        if mode is None:
            raise ModeNotFoundError(mode_id)
        return mode

    def get_mode_by_name(self, mode_name: str) -> ModeInfo:
        """Resolve a user-typed name (normalised first) to its mode."""
        canonical = normalize_mode_name(mode_name)
        mode = self._selector.get_mode_by_name(canonical)
        if mode is None:
            raise ModeNotFoundError(canonical)
        return mode

    def list_modes(self) -> list[ModeInfo]:
        return self._selector.list_modes()

    def ensure_modes(self, definitions: Iterable[Any]) -> list[ModeInfo]:
        """
        Insert any configured mode that does not exist yet.

        Existing modes are left untouched, even if their configured value
        differs, so historic runs keep the quota they were computed with.

        Args:
            definitions: Objects with ``name`` and ``allowed_direct``
                (e.g. ``ModeDefinition`` from configuration).

        Returns:
            All modes after seeding.
        """
        created = []
        for definition in definitions:
            if self._selector.get_mode_by_name(definition.name) is not None:
                continue
            self.session.add(
                Mode(mode_name=definition.name, mode_value=definition.allowed_direct)
            )
            created.append(definition.name)

        if created:
            self.session.flush()
            logger.info("modes_seeded", extra={"modes": created})

        return self._selector.list_modes()
