from app.db.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func


class Region(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    level = Column(String, nullable=False, index=True)  # "country", "province" or "city"
    parent_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    parent = relationship("Region", remote_side=[id], back_populates="children")
    children = relationship("Region", back_populates="parent", order_by="Region.id")
    polls = relationship("Poll", back_populates="region")


class UserRegion(Base):
    __tablename__ = "user_regions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    is_selected = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    user = relationship("User", back_populates="regions")
    region = relationship("Region")

    __table_args__ = (
        UniqueConstraint('user_id', 'region_id', name='unique_user_region'),
    )
