from dataclasses import dataclass
from typing import Dict

from flask import current_app

from worksheet.services.gate import READ, WRITE, GateConfig, RequestGate
from worksheet.services.leaderboard import Leaderboard
from worksheet.services.persistence import SnapshotFile, SnapshotWriter
from worksheet.services.questions import QuestionBank
from worksheet.services.quota import QuotaTracker
from worksheet.services.ratelimit import RateLimiter
from worksheet.services.scoring import ScoringService

EXTENSION_KEY = 'worksheet'


@dataclass
class QuizState:
    """Process-wide stores for one app, built once from the snapshots."""

    bank: QuestionBank
    leaderboard: Leaderboard
    quota: QuotaTracker
    limiters: Dict[str, RateLimiter]
    gate: RequestGate
    scoring: ScoringService


def build_state(app, spawn=None) -> QuizState:
    cfg = app.config
    logger = app.logger
    writer = SnapshotWriter(spawn=spawn, logger=logger)

    bank = QuestionBank.load(cfg.get('QUESTIONS_FILE'))
    leaderboard = Leaderboard(
        snapshot=SnapshotFile(cfg['SCORES_FILE'], logger=logger),
        writer=writer,
        capacity=int(cfg.get('LEADERBOARD_CAPACITY', 50)),
        view_size=int(cfg.get('LEADERBOARD_VIEW_SIZE', 10)),
        logger=logger,
    )
    leaderboard.load()
    quota = QuotaTracker(
        limit=int(cfg.get('DAILY_REQUEST_LIMIT', 100)),
        snapshot=SnapshotFile(cfg['STATS_FILE'], logger=logger),
        writer=writer,
        restore_count=bool(cfg.get('QUOTA_RESTORE_COUNT', True)),
        logger=logger,
    )
    quota.load()
    limiters = {
        READ: RateLimiter(int(cfg.get('READ_RATE_LIMIT_MAX', 100)), int(cfg.get('READ_RATE_LIMIT_WINDOW_SEC', 900))),
        WRITE: RateLimiter(int(cfg.get('WRITE_RATE_LIMIT_MAX', 10)), int(cfg.get('WRITE_RATE_LIMIT_WINDOW_SEC', 900))),
    }
    return QuizState(
        bank=bank,
        leaderboard=leaderboard,
        quota=quota,
        limiters=limiters,
        gate=RequestGate(GateConfig.from_mapping(cfg)),
        scoring=ScoringService(bank, leaderboard, name_max_length=int(cfg.get('NAME_MAX_LENGTH', 20))),
    )


def get_state(app=None) -> QuizState:
    return (app or current_app).extensions[EXTENSION_KEY]
