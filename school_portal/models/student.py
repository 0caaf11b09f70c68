from pydantic import BaseModel, model_validator
from typing import Optional


class StudentUser(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    is_active: bool = True


class Student(BaseModel):
    """Roster entry as returned by ``GET /students/``."""
    id: str
    full_name: Optional[str] = None
    user: Optional[StudentUser] = None
    admission_number: Optional[str] = None
    roll_number: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    academic_year: Optional[str] = None

    @model_validator(mode="after")
    def fill_full_name(self) -> "Student":
        if not self.full_name and self.user:
            self.full_name = f"{self.user.first_name} {self.user.last_name}".strip() or None
        return self
