"""
Region catalogue, user region selection and the visibility resolver.

The region tree has exactly three levels (country -> province -> city), so
visibility is resolved per level instead of walking the tree recursively.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.models.region import Region, UserRegion
from app.models.polls import Poll
from app.core.constants import RegionLevel, REGION_PARENT_LEVEL, BusinessLimits, ErrorMessages
from app.core.exception import NotFoundError, InputValidationError, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionScope:
    """Region ids whose polls are visible. ``region_ids is None`` means every region."""
    region_ids: Optional[Tuple[int, ...]] = None

    @property
    def includes_all(self) -> bool:
        return self.region_ids is None

    def contains(self, region_id: int) -> bool:
        return self.includes_all or region_id in self.region_ids

    def apply(self, query):
        """Restrict a Poll query to this scope"""
        if self.includes_all:
            return query
        return query.filter(Poll.region_id.in_(self.region_ids))


ALL_REGIONS = RegionScope()


def _parse_level(level: Union[str, RegionLevel]) -> RegionLevel:
    try:
        return RegionLevel(level)
    except ValueError:
        raise InputValidationError(ErrorMessages.INVALID_REGION_LEVEL, level=str(level))


def get_region(db: Session, region_id: int) -> Region:
    region = db.query(Region).filter(Region.id == region_id).first()
    if region is None:
        raise NotFoundError(ErrorMessages.REGION_NOT_FOUND, region_id=region_id)
    return region


def list_regions(db: Session, level: Optional[Union[str, RegionLevel]] = None) -> List[Region]:
    query = db.query(Region)
    if level is not None:
        query = query.filter(Region.level == _parse_level(level).value)
    return query.order_by(Region.id).all()


def resolve_visible_regions(db: Session, selected_region_id: int) -> RegionScope:
    """
    Work out which regions' polls are shown when a user browses ``selected_region_id``.

    - country: every region (no filter at all)
    - province: the province itself followed by its child cities
    - city: only the city
    """
    region = get_region(db, selected_region_id)
    level = _parse_level(region.level)

    if level == RegionLevel.COUNTRY:
        return ALL_REGIONS

    if level == RegionLevel.PROVINCE:
        child_ids = [
            child_id for (child_id,) in db.query(Region.id)
            .filter(Region.parent_id == region.id)
            .order_by(Region.id)
        ]
        return RegionScope(region_ids=(region.id, *child_ids))

    return RegionScope(region_ids=(region.id,))


def create_region(
    db: Session,
    name: str,
    level: Union[str, RegionLevel],
    parent_id: Optional[int] = None,
    commit: bool = True
) -> Region:
    """Insert a region after checking it fits the country/province/city tree"""
    name = (name or "").strip()
    if not name or len(name) > BusinessLimits.MAX_REGION_NAME_LENGTH:
        raise InputValidationError(
            f"Region name must be 1-{BusinessLimits.MAX_REGION_NAME_LENGTH} characters long",
            name=name
        )

    level = _parse_level(level)
    expected_parent_level = REGION_PARENT_LEVEL[level]

    if expected_parent_level is None:
        if parent_id is not None:
            raise InputValidationError(ErrorMessages.INVALID_REGION_PARENT, level=level.value)
    else:
        if parent_id is None:
            raise InputValidationError(ErrorMessages.INVALID_REGION_PARENT, level=level.value)
        parent = get_region(db, parent_id)
        if parent.level != expected_parent_level.value:
            raise InputValidationError(
                ErrorMessages.INVALID_REGION_PARENT,
                level=level.value,
                parent_level=parent.level
            )

    region = Region(name=name, level=level.value, parent_id=parent_id)
    db.add(region)
    try:
        if commit:
            db.commit()
            db.refresh(region)
        else:
            db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating region '{name}': {e}")
        raise StorageError(region_name=name) from e

    return region


def get_selected_region(db: Session, user_id: int) -> Optional[Region]:
    return (
        db.query(Region)
        .join(UserRegion, UserRegion.region_id == Region.id)
        .filter(UserRegion.user_id == user_id, UserRegion.is_selected.is_(True))
        .first()
    )


def set_selected_region(db: Session, user_id: int, region_id: int) -> Region:
    """Make ``region_id`` the user's only selected browsing region"""
    region = get_region(db, region_id)

    try:
        db.query(UserRegion).filter(
            UserRegion.user_id == user_id,
            UserRegion.region_id != region_id
        ).update({UserRegion.is_selected: False}, synchronize_session=False)

        user_region = db.query(UserRegion).filter(
            UserRegion.user_id == user_id,
            UserRegion.region_id == region_id
        ).first()

        if user_region is None:
            db.add(UserRegion(user_id=user_id, region_id=region_id, is_selected=True))
        else:
            user_region.is_selected = True

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error selecting region {region_id} for user {user_id}: {e}")
        raise StorageError(region_id=region_id) from e

    logger.info(f"User {user_id} selected region {region_id} ({region.level})")
    return region
