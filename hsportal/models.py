from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class AchievementRate(Base):
    __tablename__ = "achievement_rates"
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    target = Column(Float, default=0)
    achieved = Column(Float, default=0)
    rate = Column(Float, default=0)
    period = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "target": self.target,
            "achieved": self.achieved,
            "rate": self.rate,
            "period": self.period,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class Database:
    """Engine and session factory for one database URL.

    Created once per process by the application factory and disposed on
    shutdown, so tests can hand the app their own instance.
    """

    def __init__(self, url: str, **engine_kwargs) -> None:
        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
