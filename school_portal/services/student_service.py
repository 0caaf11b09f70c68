from typing import List

from school_portal.core.api_client import SchoolApiClient
from school_portal.models.student import Student


class StudentService:
    def __init__(self, client: SchoolApiClient):
        self.client = client

    async def get_all(self) -> List[Student]:
        """Full tenant roster; class/section narrowing happens on our side."""
        data = await self.client.get("/students/")
        return [Student.model_validate(item) for item in data or []]
