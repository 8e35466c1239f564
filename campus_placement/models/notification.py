"""In-app notifications."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Index, String, Text, Uuid

from campus_placement.db.base import Base


class Notification(Base):
    """
    Notification rows created after job reviews and application updates.
    Delivery (email, push) is handled outside this service.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_recipient_read", "recipient_id", "is_read"),
    )

    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)  # Job, Application, System
    priority = Column(String(10), default="Medium")  # Low, Medium, High, Urgent
    link = Column(String(500), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    extra_data = Column(JSON, default=dict)  # {"job_id": ..., "application_id": ...}

    def __repr__(self):
        return f"<Notification {self.type} -> {self.recipient_id}>"
