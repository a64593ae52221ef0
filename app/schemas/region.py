from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from app.core.constants import RegionLevel


class RegionRead(BaseModel):
    """Schema for reading region data"""
    id: int
    name: str
    level: RegionLevel
    parent_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class SelectedRegionUpdate(BaseModel):
    """Body of the 'select my browsing region' request"""
    region_id: int = Field(..., gt=0, description="Region to browse polls in")
