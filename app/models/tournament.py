from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    time_game = Column(Integer, nullable=True) # minutes, informational
    created_at = Column(DateTime, default=utcnow, nullable=False)
    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True) # null -> still open
    # participants reference tournaments too, so the FK is added after both tables exist
    winner_id = Column(
        Integer,
        ForeignKey("participants.id", use_alter=True, name="fk_tournaments_winner_id"),
        nullable=True,
    )

    participants = relationship(
        "Participant",
        back_populates="tournament",
        foreign_keys="Participant.tournament_id",
        order_by="Participant.id",
    )
    matches = relationship(
        "Match",
        back_populates="tournament",
        order_by="Match.id",
    )
    winner = relationship("Participant", foreign_keys=[winner_id], post_update=True)

    @property
    def is_closed(self) -> bool:
        return self.ended_at is not None
