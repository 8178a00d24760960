# db/models/ranking.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, func
from src.db import Base
import uuid


class RankingResponse(Base):
    __tablename__ = "ranking_responses"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    submission_id: Mapped[str] = mapped_column(String, ForeignKey("survey_submissions.id"), nullable=False, index=True)
    role_title: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    icon_name: Mapped[str] = mapped_column(String(100), nullable=False)
    rank_position: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    submission = relationship("Submission", back_populates="ranking_responses")

    __table_args__ = (
        CheckConstraint("rank_position BETWEEN 1 AND 4", name="ck_rank_position_range"),
    )
