"""Audit trail of workflow transitions."""

from sqlalchemy import JSON, Column, ForeignKey, Index, String, Uuid

from campus_placement.db.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("idx_activity_logs_entity", "entity_type", "entity_id"),
    )

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    entity_type = Column(String(30), nullable=True)  # Job, Application, Student
    entity_id = Column(Uuid(as_uuid=True), nullable=True)
    details = Column(JSON, default=dict)

    def __repr__(self):
        return f"<ActivityLog {self.action} {self.entity_type}:{self.entity_id}>"
