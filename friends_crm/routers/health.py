from datetime import datetime, timezone

from fastapi import APIRouter

from friends_crm import schemas

router = APIRouter(tags=["Health"])


@router.get("/health-check", response_model=schemas.HealthOut)
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}
