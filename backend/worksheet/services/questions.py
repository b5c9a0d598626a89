import json
from typing import Dict, List, Mapping, Optional

from worksheet.models import Question
from .question_data import DEFAULT_QUESTIONS


class QuestionBank:
    """Read-only question set. Order is fixed at construction."""

    def __init__(self, questions):
        self._questions: List[Question] = list(questions)
        self._by_id: Dict[str, Question] = {}
        for q in self._questions:
            if q.id in self._by_id:
                raise ValueError(f"Duplicate question id {q.id!r}")
            self._by_id[q.id] = q

    @classmethod
    def from_dicts(cls, rows):
        return cls(Question.from_dict(row) for row in rows)

    @classmethod
    def from_file(cls, path):
        with open(path, 'r', encoding='utf-8') as fh:
            return cls.from_dicts(json.load(fh))

    @classmethod
    def load(cls, path: Optional[str] = None) -> 'QuestionBank':
        if path:
            return cls.from_file(path)
        return cls.from_dicts(DEFAULT_QUESTIONS)

    def __len__(self):
        return len(self._questions)

    def list(self):
        return [q.to_public_dict() for q in self._questions]

    def check(self, question_id, answer) -> bool:
        q = self._by_id.get(question_id)
        if q is None:
            return False
        return isinstance(answer, str) and answer == q.correct_answer

    def score(self, answers: Mapping) -> int:
        return sum(1 for q in self._questions if self.check(q.id, answers.get(q.id)))
