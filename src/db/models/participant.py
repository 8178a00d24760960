# db/models/participant.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, func
from src.db import Base
import uuid


class Participant(Base):
    __tablename__ = "survey_participants"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    age: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    field_of_study: Mapped[str] = mapped_column(String(100), nullable=False)
    country_of_residence: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    submissions = relationship("Submission", back_populates="participant")
