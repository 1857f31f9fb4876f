from sqlalchemy import Column, String, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from rewards_engine.db import Base


class Recognition(Base):
    __tablename__ = "recognitions"

    id = Column(String(100), primary_key=True)

    giver_id = Column(String(100), ForeignKey("users.id"), nullable=False)
    receiver_id = Column(String(100), ForeignKey("users.id"), nullable=False)

    principle = Column(String(100), nullable=False)
    reason = Column(String(1000))

    timestamp = Column(TIMESTAMP, server_default=func.now())
