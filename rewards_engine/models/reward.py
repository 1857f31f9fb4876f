from sqlalchemy import Column, String, Integer
from rewards_engine.db import Base


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(String(100), primary_key=True)

    name = Column(String(100), nullable=False)
    description = Column(String(255))

    # minimum level to redeem
    required_level = Column(Integer, nullable=False, default=0)

    initial_stock = Column(Integer, nullable=False, default=0)
    point_cost = Column(Integer, nullable=False, default=0)

    image_url = Column(String(500))
