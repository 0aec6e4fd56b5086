import time

from sitereq.enhanced_logging import get_random_hash
from sitereq.settings import set_context_var, reset_context_var
from sitereq.stats import stats_add_timing_metric_http


async def bind_log_context(request):
    request.ctx.started_at = time.time()
    set_context_var('http_request_uuid', get_random_hash())
    set_context_var('http_verb', f'{request.method} ')
    set_context_var('http_address', request.path)


async def release_log_context(request, response):
    started_at = getattr(request.ctx, 'started_at', None)
    if started_at is not None and request.route is not None:
        stats_add_timing_metric_http(request.route.name.replace('.', '_'), time.time() - started_at)
    for name in ('http_request_uuid', 'http_verb', 'http_address'):
        reset_context_var(name)
