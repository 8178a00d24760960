# db/models/submission.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, Enum, ForeignKey, func
from src.db import Base
import enum
import uuid


class CompletionStatus(str, enum.Enum):
    completed = "completed"


class Submission(Base):
    __tablename__ = "survey_submissions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    participant_id: Mapped[str] = mapped_column(String, ForeignKey("survey_participants.id"), nullable=False, index=True)
    completion_status: Mapped[CompletionStatus] = mapped_column(
        Enum(CompletionStatus, native_enum=False), default=CompletionStatus.completed, nullable=False
    )
    survey_version: Mapped[str] = mapped_column(String, default="1.0", nullable=False)
    submitted_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    participant = relationship("Participant", back_populates="submissions")
    responses = relationship("Response", back_populates="submission", order_by="Response.response_order")
    ranking_responses = relationship("RankingResponse", back_populates="submission")
