from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.db.database import get_db
from app.schemas.region import RegionRead
from app.core.constants import RegionLevel
from app.services import regions as region_service
from app.api.v1.responses import get_region_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/regions", tags=["regions"])


@router.get(
    "/",
    response_model=List[RegionRead],
    summary="List regions",
    description="All regions of the country/province/city tree, optionally restricted to one level."
)
def list_regions(
    level: Optional[RegionLevel] = Query(None, description="Only return regions of this level"),
    db: Session = Depends(get_db)
):
    return region_service.list_regions(db, level)


@router.get(
    "/{region_id}",
    response_model=RegionRead,
    summary="Get a region",
    responses=get_region_responses()
)
def get_region(region_id: int, db: Session = Depends(get_db)):
    return region_service.get_region(db, region_id)
