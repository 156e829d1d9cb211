from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from approval_service.db.session import Base, utcnow


class Supervisor(Base):
    __tablename__ = "supervisors"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    hashed_password = Column(String(128), nullable=False)
    created_at = Column(DateTime, default=utcnow)


class SupervisorSession(Base):
    __tablename__ = "supervisor_sessions"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(128), nullable=False, unique=True, index=True)
    supervisor_id = Column(Integer, ForeignKey("supervisors.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    supervisor = relationship("Supervisor")
