from sqlalchemy import Column, String, Integer, TIMESTAMP
from sqlalchemy.sql import func
from rewards_engine.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(100), primary_key=True)

    name = Column(String(200), nullable=False, default="")
    email = Column(String(255))

    status = Column(String(20), default="active")      # active / inactive
    role = Column(String(20), default="contributor")   # contributor / granter / admin

    # carry-over balance from the previous program
    historical_points = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=func.now())
