from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Mapping

from worksheet.errors import ValidationError
from worksheet.models import ScoreEntry
from .leaderboard import Leaderboard
from .questions import QuestionBank


@dataclass(frozen=True)
class ScoreResult:
    score: int
    total: int
    entry: ScoreEntry
    high_scores: List[dict]

    @property
    def message(self) -> str:
        return f"Score: {self.score}/{self.total}"

    def to_dict(self):
        return {
            'score': self.score,
            'message': self.message,
            'highScores': self.high_scores,
            'saved': True,
        }


class ScoringService:
    """Turns a submission into a score and a leaderboard update."""

    def __init__(self, bank: QuestionBank, leaderboard: Leaderboard, name_max_length: int = 20,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.bank = bank
        self.leaderboard = leaderboard
        self.name_max_length = name_max_length
        self.clock = clock

    def submit(self, name, user_answers) -> ScoreResult:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('name is required')
        if not user_answers:
            raise ValidationError('userAnswers is required')
        if not isinstance(user_answers, Mapping):
            raise ValidationError('userAnswers must be an object mapping question ids to answers')

        score = self.bank.score(user_answers)
        entry = ScoreEntry(
            name=name.strip()[:self.name_max_length],
            score=score,
            submitted_at=self.clock(),
        )
        high_scores = self.leaderboard.submit(entry)
        return ScoreResult(score=score, total=len(self.bank), entry=entry, high_scores=high_scores)
