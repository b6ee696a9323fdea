from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

BYE_SCORE = 0.5

class Match(Base):
    __tablename__ = "matches"
    # Two writers racing to create the same round collide here at commit time
    __table_args__ = (
        UniqueConstraint("tournament_id", "round", "player_a_id", name="uq_matches_round_player_a"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    round = Column(Integer, nullable=False) # 1-based
    player_a_id = Column(Integer, ForeignKey("participants.id"), nullable=False)
    player_b_id = Column(Integer, ForeignKey("participants.id"), nullable=True) # null -> bye
    score_a = Column(Float, nullable=True) # 0, 0.5 or 1; null until played
    score_b = Column(Float, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    tournament = relationship("Tournament", back_populates="matches")
    player_a = relationship("Participant", foreign_keys=[player_a_id])
    player_b = relationship("Participant", foreign_keys=[player_b_id])

    @property
    def is_bye(self) -> bool:
        return self.player_b_id is None
