"""Class roster derivation from the tenant-wide student list."""
from typing import Iterable, List

from school_portal.models.exam import Exam
from school_portal.models.student import Student


def filter_roster(students: Iterable[Student], class_name: str, section: str) -> List[Student]:
    """
    Students whose class and section equal the given ones.

    Comparison is exact: no trimming, no case folding.
    """
    return [
        student for student in students
        if student.class_name == class_name and student.section == section
    ]


def roster_for_exam(students: Iterable[Student], exam: Exam) -> List[Student]:
    return filter_roster(students, exam.class_name, exam.section)
