from flask import current_app, request

from worksheet.errors import AdmissionDenied, QuotaExceeded, RateExceeded
from worksheet.services.gate import RequestContext
from worksheet.state import get_state


def request_context() -> RequestContext:
    return RequestContext.build(
        path=request.path,
        method=request.method,
        headers=request.headers,
        remote_addr=request.remote_addr,
    )


def admit_request():
    """before_request hook: gate, then rate limit, then daily quota."""
    state = get_state()
    ctx = request_context()

    decision = state.gate.evaluate(ctx)
    if not decision.admitted:
        headers = {'Allow': ', '.join(decision.allowed_methods)} if decision.allowed_methods else None
        raise AdmissionDenied(decision.status, decision.reason, headers=headers)

    route_class = state.gate.route_class(ctx)
    if route_class is None:
        return None

    key = ctx.client_key(current_app.config.get('TRUST_FORWARDED_FOR', False))
    limiter = state.limiters[route_class]
    if not limiter.allow(key):
        retry_after = limiter.retry_after(key)
        current_app.logger.info(f"[rate-limit] client={key} class={route_class} retry_after={retry_after:.0f}s")
        raise RateExceeded(retry_after)

    quota = state.quota.check_and_increment()
    if not quota.admit:
        current_app.logger.warning(f"[quota] daily limit {quota.limit} reached, rejecting {ctx.method} {ctx.path}")
        raise QuotaExceeded(quota.limit, quota.next_reset)
    return None


def register_admission(app):
    app.before_request(admit_request)
