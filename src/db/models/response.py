# db/models/response.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, func
from src.db import Base
import uuid


class Response(Base):
    __tablename__ = "survey_responses"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    submission_id: Mapped[str] = mapped_column(String, ForeignKey("survey_submissions.id"), nullable=False, index=True)
    role_title: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    assigned_icon: Mapped[str] = mapped_column(String(100), nullable=False)
    response_order: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    submission = relationship("Submission", back_populates="responses")

    __table_args__ = (
        CheckConstraint("response_order >= 0", name="ck_response_order_non_negative"),
    )
