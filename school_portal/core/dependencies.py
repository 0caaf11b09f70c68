"""FastAPI dependencies that hand each request its own school API client."""
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Request

from school_portal.core.api_client import SchoolApiClient
from school_portal.services.exam_service import ExamService
from school_portal.services.student_service import StudentService


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_api_client(
    request: Request,
    authorization: Optional[str] = Header(None),
    x_tenant_id: Optional[str] = Header(None),
) -> AsyncIterator[SchoolApiClient]:
    """
    Client carrying the caller's credentials to the school API.

    Reuses the connection pool opened at startup when there is one.
    """
    http_client = getattr(request.app.state, "http_client", None)
    client = SchoolApiClient(
        access_token=bearer_token(authorization),
        tenant_id=x_tenant_id,
        http_client=http_client,
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_exam_service(client: SchoolApiClient = Depends(get_api_client)) -> ExamService:
    return ExamService(client)


def get_student_service(client: SchoolApiClient = Depends(get_api_client)) -> StudentService:
    return StudentService(client)
