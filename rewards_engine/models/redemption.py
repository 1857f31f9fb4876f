from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from rewards_engine.db import Base


class Redemption(Base):
    __tablename__ = "redemptions"

    id = Column(String(100), primary_key=True)

    user_id = Column(String(100), ForeignKey("users.id"), nullable=False)
    reward_id = Column(String(100), ForeignKey("rewards.id"), nullable=False)

    timestamp = Column(TIMESTAMP, server_default=func.now())

    status = Column(String(20), nullable=False, default="pending")
    # pending | approved | rejected, transitioned by the approval workflow

    required_points = Column(Integer, nullable=True)
    points_before = Column(Integer, nullable=True)
    points_after = Column(Integer, nullable=True)
    notes = Column(String(1000))
