"""Request admission gate.

The gate decides from ``(path, method, headers)`` alone whether a request
may reach the API. It runs an ordered list of checks; each one can only deny
(or, for utility paths, end the pipeline early with an admit). The origin and
user-agent checks are best-effort bot-traffic reduction, not a security
boundary: every header they read is client controlled.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Tuple


READ = 'read'
WRITE = 'write'


@dataclass(frozen=True)
class RequestContext:
    path: str
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    remote_addr: Optional[str] = None

    @classmethod
    def build(cls, path, method, headers=None, remote_addr=None):
        lowered = {str(k).lower(): str(v) for k, v in (headers or {}).items()}
        return cls(path=path, method=method.upper(), headers=lowered, remote_addr=remote_addr)

    def header(self, name: str) -> Optional[str]:
        value = self.headers.get(name.lower())
        if value is None:
            return None
        value = value.strip()
        return value or None

    def client_key(self, trust_forwarded_for: bool = False) -> str:
        if trust_forwarded_for:
            forwarded = self.header('X-Forwarded-For')
            if forwarded:
                first = forwarded.split(',')[0].strip()
                if first:
                    return first
        return self.remote_addr or 'unknown'


@dataclass(frozen=True)
class GateDecision:
    admitted: bool
    status: int = 200
    reason: str = 'ok'
    exempt: bool = False
    # Filled on 405 denials, sent back as the Allow header
    allowed_methods: Tuple[str, ...] = ()

    @classmethod
    def admit(cls, reason='ok'):
        return cls(True, 200, reason)

    @classmethod
    def deny(cls, status, reason):
        return cls(False, status, reason)


@dataclass(frozen=True)
class MethodRule:
    route_class: str = READ
    content_type: Optional[str] = None


@dataclass(frozen=True)
class RouteRule:
    methods: Mapping[str, MethodRule]

    def lookup(self, method) -> Optional[MethodRule]:
        # Flask answers HEAD wherever GET is routed
        if method == 'HEAD' and 'HEAD' not in self.methods:
            method = 'GET'
        return self.methods.get(method)

    def allowed_methods(self) -> Tuple[str, ...]:
        allowed = set(self.methods) | {'OPTIONS'}
        if 'GET' in allowed:
            allowed.add('HEAD')
        return tuple(sorted(allowed))


def default_routes() -> Dict[str, RouteRule]:
    return {
        '/api/questions': RouteRule({'GET': MethodRule(READ)}),
        '/api/scores': RouteRule({
            'GET': MethodRule(READ),
            'POST': MethodRule(WRITE, content_type='application/json'),
        }),
    }


@dataclass
class GateConfig:
    allowed_origins: Sequence[str] = ()
    allow_missing_origin: bool = True
    bot_signatures: Sequence[str] = ()
    require_browser_user_agent: bool = True
    browser_user_agent_patterns: Sequence[str] = ()
    routes: Mapping[str, RouteRule] = field(default_factory=default_routes)
    utility_paths: FrozenSet[str] = frozenset({'/', '/health', '/api/stats'})

    @classmethod
    def from_mapping(cls, config):
        utility = {'/', '/health', '/api/stats'}
        if config.get('ENABLE_DEBUG_ROUTE'):
            utility.add('/debug')
        return cls(
            allowed_origins=tuple(config.get('ALLOWED_ORIGINS') or ()),
            allow_missing_origin=bool(config.get('ALLOW_MISSING_ORIGIN', True)),
            bot_signatures=tuple(config.get('BOT_SIGNATURES') or ()),
            require_browser_user_agent=bool(config.get('REQUIRE_BROWSER_USER_AGENT', True)),
            browser_user_agent_patterns=tuple(config.get('BROWSER_USER_AGENT_PATTERNS') or ()),
            utility_paths=frozenset(utility),
        )


class RequestGate:
    def __init__(self, config: GateConfig):
        self.config = config
        self._origins = [o.rstrip('/').lower() for o in config.allowed_origins]
        self._signatures = [s.lower() for s in config.bot_signatures if s]
        self._browser_patterns = [re.compile(p) for p in config.browser_user_agent_patterns]
        self.checks = [
            self.check_path,
            self.check_origin,
            self.check_user_agent,
            self.check_method,
        ]

    def evaluate(self, ctx: RequestContext) -> GateDecision:
        for check in self.checks:
            decision = check(ctx)
            if not decision.admitted or decision.exempt:
                return decision
        return GateDecision.admit()

    def route_class(self, ctx: RequestContext) -> Optional[str]:
        """Rate-limit class for a metered request, None when not metered."""
        rule = self.config.routes.get(ctx.path)
        if rule is None or ctx.method == 'OPTIONS':
            return None
        method_rule = rule.lookup(ctx.method)
        return method_rule.route_class if method_rule else None

    def check_path(self, ctx: RequestContext) -> GateDecision:
        if ctx.path in self.config.utility_paths:
            return GateDecision(True, 200, f"utility path {ctx.path}", exempt=True)
        if ctx.path in self.config.routes:
            return GateDecision.admit()
        return GateDecision.deny(404, f"path {ctx.path!r} not in allow-list")

    def check_origin(self, ctx: RequestContext) -> GateDecision:
        source = ctx.header('Origin') or ctx.header('Referer')
        if source is None:
            if self.config.allow_missing_origin:
                return GateDecision.admit('no origin, permissive policy')
            return GateDecision.deny(403, 'missing Origin/Referer')
        candidate = source.lower()
        for allowed in self._origins:
            if candidate == allowed or candidate.startswith(allowed + '/'):
                return GateDecision.admit()
        return GateDecision.deny(403, f"origin {source!r} not allowed")

    def check_user_agent(self, ctx: RequestContext) -> GateDecision:
        agent = ctx.header('User-Agent') or ''
        lowered = agent.lower()
        for signature in self._signatures:
            if signature in lowered:
                return GateDecision.deny(403, f"user agent matches bot signature {signature!r}")
        if self.config.require_browser_user_agent:
            if not any(p.search(agent) for p in self._browser_patterns):
                return GateDecision.deny(403, f"user agent {agent[:100]!r} does not look like a browser")
        return GateDecision.admit()

    def check_method(self, ctx: RequestContext) -> GateDecision:
        rule = self.config.routes.get(ctx.path)
        if rule is None:
            return GateDecision.admit()
        if ctx.method == 'OPTIONS':
            return GateDecision.admit('preflight')
        method_rule = rule.lookup(ctx.method)
        if method_rule is None:
            return GateDecision(
                False, 405, f"method {ctx.method} not allowed on {ctx.path}",
                allowed_methods=rule.allowed_methods())
        if method_rule.content_type:
            declared = (ctx.header('Content-Type') or '').split(';')[0].strip().lower()
            if declared != method_rule.content_type:
                return GateDecision.deny(
                    403, f"content type {declared or 'none'!r} on {ctx.method} {ctx.path}, "
                         f"expected {method_rule.content_type}")
        return GateDecision.admit()
