"""
Admit card selection.

There is no document generation backend yet: ``generate`` waits a fixed
delay and reports success, ``download`` only returns a notice.
"""
import asyncio
from typing import Dict, Iterable, Iterator, List, Set

from school_portal.core.exceptions import ValidationError
from school_portal.core.logging_config import get_logger
from school_portal.models.student import Student
from school_portal.models.ui import Alert

logger = get_logger(__name__)

NO_SELECTION_MESSAGE = "Please select at least one student"


class AdmitCardSelection:
    """Set of selected student ids, limited to the roster it was built for."""

    def __init__(self, roster: Iterable[Student]):
        self.roster: List[Student] = list(roster)
        self._roster_ids = [student.id for student in self.roster]
        self._selected: Set[str] = set()

    def __contains__(self, student_id: str) -> bool:
        return student_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def __iter__(self) -> Iterator[str]:
        return iter(self.selected)

    @property
    def selected(self) -> List[str]:
        # Roster order keeps output stable
        return [student_id for student_id in self._roster_ids if student_id in self._selected]

    def select(self, student_id: str) -> None:
        if student_id not in self._roster_ids:
            raise ValidationError(
                f"Student {student_id} is not on this exam's roster",
                error_code="STUDENT_NOT_ON_ROSTER",
            )
        self._selected.add(student_id)

    def deselect(self, student_id: str) -> None:
        self._selected.discard(student_id)

    def toggle(self, student_id: str) -> bool:
        """Flip membership; returns True when the student is now selected."""
        if student_id in self._selected:
            self.deselect(student_id)
            return False
        self.select(student_id)
        return True

    def select_all(self) -> None:
        self._selected = set(self._roster_ids)

    def clear(self) -> None:
        self._selected.clear()

    def stats(self) -> Dict[str, int]:
        # Generation status is not tracked by the school API, so nothing counts as generated
        generated = 0
        return {
            "total": len(self.roster),
            "generated": generated,
            "pending": len(self.roster) - generated,
            "selected": len(self._selected),
        }

    async def generate(self, delay_seconds: float = 2.0) -> Alert:
        if not self._selected:
            raise ValidationError(NO_SELECTION_MESSAGE, error_code="NO_STUDENTS_SELECTED")
        count = len(self._selected)
        logger.info(f"Generating admit cards for {count} student(s)")
        await asyncio.sleep(delay_seconds)
        self.clear()
        return Alert(type="success", message=f"Admit cards generated for {count} students")


def download_notice() -> Alert:
    return Alert(type="info", message="Downloading all admit cards...")
