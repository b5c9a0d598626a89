from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


@dataclass(frozen=True)
class Question:
    id: str
    question: str
    correct_answer: str
    choices: Tuple[str, ...]

    def __post_init__(self):
        if self.correct_answer not in self.choices:
            raise ValueError(f"Question {self.id}: correct answer {self.correct_answer!r} is not a choice")

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            question=str(data.get('question', '')),
            correct_answer=str(data.get('correct_answer', data.get('correctAnswer'))),
            choices=tuple(str(c) for c in data['choices']),
        )

    def to_public_dict(self):
        # Never includes the correct answer
        return {
            'id': self.id,
            'question': self.question,
            'choices': list(self.choices),
        }


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def date(self) -> str:
        return self.submitted_at.date().isoformat()

    def to_public_dict(self):
        return {
            'name': self.name,
            'score': self.score,
            'date': self.date,
        }

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
            'submitted_at': self.submitted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data) -> Optional['ScoreEntry']:
        """Parse a snapshot row, or return None when it is unusable.

        Accepts both the current ``submitted_at`` ISO format and the older
        rows that stored ``date`` as epoch milliseconds.
        """
        if not isinstance(data, dict):
            return None
        name = data.get('name')
        score = data.get('score')
        if not isinstance(name, str) or isinstance(score, bool) or not isinstance(score, int) or score < 0:
            return None
        submitted_at = None
        raw = data.get('submitted_at')
        if isinstance(raw, str):
            try:
                submitted_at = datetime.fromisoformat(raw)
            except ValueError:
                return None
        elif isinstance(data.get('date'), (int, float)) and not isinstance(data.get('date'), bool):
            submitted_at = datetime.fromtimestamp(data['date'] / 1000.0, tz=timezone.utc)
        if submitted_at is None:
            return None
        if submitted_at.tzinfo is None:
            submitted_at = submitted_at.replace(tzinfo=timezone.utc)
        return cls(name=name, score=score, submitted_at=submitted_at)
