import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from app.functions import admin_dashboard_functions
from app.utils.errors import StorageUnavailable
from app.utils.jwt_handler import verify_token

router = APIRouter()
logger = logging.getLogger(__name__)

def get_current_admin(request: Request):
    token = request.headers.get("Authorization", "").replace("Bearer ", "")
    user_data = verify_token(token)
    if not user_data:
        raise HTTPException(status_code=401, detail="Invalid or missing token")
    if user_data.get("user_type") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_data

@router.get("/dashboard/views")
def get_dashboard_views(admin=Depends(get_current_admin)):
    try:
        metrics = admin_dashboard_functions.get_view_metrics()
    except StorageUnavailable as e:
        logger.warning(f"Dashboard view metrics unavailable: {e}")
        raise HTTPException(status_code=503, detail="View metrics unavailable")
    return {"success": True, "data": metrics}
