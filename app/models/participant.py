from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

class Participant(Base):
    __tablename__ = "participants"
    # A user joins a tournament at most once
    __table_args__ = (
        UniqueConstraint("tournament_id", "user_id", name="uq_participants_tournament_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False) # owned by the external user service
    bye_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    tournament = relationship("Tournament", back_populates="participants", foreign_keys=[tournament_id])
