from sqlalchemy import Column, Integer, String
from dashboard.core.database import Base


class Revenue(Base):
    __tablename__ = "revenue"

    month = Column(String(4), primary_key=True)
    revenue = Column(Integer, nullable=False)
