import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default):
    value = os.environ.get(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


DEFAULT_ALLOWED_ORIGINS = [
    'https://math-worksheet-vue.vercel.app',
    'http://localhost:3000',
    'http://localhost:5173',
    'http://localhost:8080',
]

DEFAULT_BOT_SIGNATURES = [
    'bot', 'crawler', 'spider', 'scraper', 'scrapy', 'curl', 'wget',
    'python-requests', 'python-urllib', 'aiohttp', 'httpx', 'go-http-client',
    'java/', 'okhttp', 'libwww-perl', 'node-fetch', 'axios', 'postman',
    'insomnia', 'headless', 'phantomjs', 'selenium', 'puppeteer', 'playwright',
]

# A browser agent looks like "Mozilla/5.0 (<platform>) <Engine>/<version> ..."
DEFAULT_BROWSER_USER_AGENT_PATTERNS = [
    r'^Mozilla/5\.0 \([^)]+\) .*(AppleWebKit|Gecko|Trident)/',
]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))

    # Snapshot files (JSON); missing or corrupt files fall back to empty state
    SCORES_FILE = os.environ.get('SCORES_FILE', 'scores.json')
    STATS_FILE = os.environ.get('STATS_FILE', 'stats.json')
    # Optional override for the built-in question set
    QUESTIONS_FILE = os.environ.get('QUESTIONS_FILE')

    LEADERBOARD_CAPACITY = int(os.environ.get('LEADERBOARD_CAPACITY', '50'))
    LEADERBOARD_VIEW_SIZE = int(os.environ.get('LEADERBOARD_VIEW_SIZE', '10'))
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', '20'))

    DAILY_REQUEST_LIMIT = int(os.environ.get('DAILY_REQUEST_LIMIT', '100'))
    # Restore today's request count from the stats snapshot on startup
    QUOTA_RESTORE_COUNT = _env_bool('QUOTA_RESTORE_COUNT', True)

    READ_RATE_LIMIT_MAX = int(os.environ.get('READ_RATE_LIMIT_MAX', '100'))
    READ_RATE_LIMIT_WINDOW_SEC = int(os.environ.get('READ_RATE_LIMIT_WINDOW_SEC', '900'))
    WRITE_RATE_LIMIT_MAX = int(os.environ.get('WRITE_RATE_LIMIT_MAX', '10'))
    WRITE_RATE_LIMIT_WINDOW_SEC = int(os.environ.get('WRITE_RATE_LIMIT_WINDOW_SEC', '900'))

    ALLOWED_ORIGINS = _env_list('ALLOWED_ORIGINS', DEFAULT_ALLOWED_ORIGINS)
    # Non-browser clients send no Origin; False makes the gate strict
    ALLOW_MISSING_ORIGIN = _env_bool('ALLOW_MISSING_ORIGIN', True)
    REQUIRE_BROWSER_USER_AGENT = _env_bool('REQUIRE_BROWSER_USER_AGENT', True)
    BOT_SIGNATURES = _env_list('BOT_SIGNATURES', DEFAULT_BOT_SIGNATURES)
    BROWSER_USER_AGENT_PATTERNS = DEFAULT_BROWSER_USER_AGENT_PATTERNS
    TRUST_FORWARDED_FOR = _env_bool('TRUST_FORWARDED_FOR', False)

    ENABLE_DEBUG_ROUTE = _env_bool('ENABLE_DEBUG_ROUTE', False)
