from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_current_user
from app.common.errors import StorageError, to_http_exception
from .schema import StudentDashboardOut
from .service import dashboard_service

router = APIRouter(prefix="/student", tags=["dashboard"])


@router.get("/dashboard", response_model=StudentDashboardOut, response_model_by_alias=True)
async def student_dashboard(current_user: CurrentUser = Depends(get_current_user)):
    """Enrolled courses with progress, grade breakdown and completion eligibility."""
    try:
        courses = await dashboard_service.get_student_dashboard(current_user.id)
    except StorageError as exc:
        raise to_http_exception(exc)
    return {"courses": courses}
