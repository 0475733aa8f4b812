"""
Module: compliance_kernel.selectors.mode_selector
Responsibility: Read-only lookups of compliance modes.
Architecture position: Kernel > Selectors.
"""

from sqlalchemy import select

from compliance_kernel.domain.types import ModeInfo
from compliance_kernel.models.mode import Mode
from compliance_kernel.selectors.base import BaseSelector


def mode_to_info(mode: Mode) -> ModeInfo:
    return ModeInfo(id=mode.id, mode_name=mode.mode_name, allowed_direct=mode.mode_value)


class ModeSelector(BaseSelector):
    """Mode lookups by id or name.  Missing modes return None."""

    def get_mode_by_id(self, mode_id: int) -> ModeInfo | None:
        mode = self._execute(select(Mode).where(Mode.id == mode_id)).scalar_one_or_none()
        return mode_to_info(mode) if mode is not None else None

    def get_mode_by_name(self, mode_name: str) -> ModeInfo | None:
        mode = self._execute(
            select(Mode).where(Mode.mode_name == mode_name)
        ).scalar_one_or_none()
        return mode_to_info(mode) if mode is not None else None

    def list_modes(self) -> list[ModeInfo]:
        modes = self._execute(select(Mode).order_by(Mode.id)).scalars().all()
        return [mode_to_info(m) for m in modes]
