from fastapi import APIRouter
from school_portal.api.v1.endpoints import exams, mark_entry, results, admit_cards

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(exams.router, prefix="/exams", tags=["Exams"])
api_router.include_router(mark_entry.router, prefix="/mark-entry", tags=["Mark Entry"])
api_router.include_router(results.router, prefix="/results", tags=["Results"])
api_router.include_router(admit_cards.router, prefix="/admit-cards", tags=["Admit Cards"])
