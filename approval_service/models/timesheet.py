from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from approval_service.db.session import Base, utcnow

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


class TimesheetSubmission(Base):
    __tablename__ = "timesheet_submissions"

    id = Column(Integer, primary_key=True, index=True)
    employee_name = Column(String(200), nullable=False)
    pay_period = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=PENDING, index=True)
    timesheet_data = Column(JSON, nullable=False)
    supervisor_id = Column(Integer, ForeignKey("supervisors.id"), nullable=True)
    employee_signature = Column(Text, nullable=True)
    employee_signature_date = Column(String(50), nullable=True)
    supervisor_signature = Column(Text, nullable=True)
    supervisor_signature_date = Column(String(50), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by_id = Column(Integer, ForeignKey("supervisors.id"), nullable=True)
    submitted_at = Column(DateTime, default=utcnow)
    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)

    supervisor = relationship("Supervisor", foreign_keys=[supervisor_id])
    reviewed_by = relationship("Supervisor", foreign_keys=[reviewed_by_id])
