import logging

from sitereq.settings import Settings

logger = logging.getLogger()


async def auth(request):
    """
    The actor is identified upstream, here it is only picked from the configured header.
    Missing or unknown actors are refused by the handlers that need one.
    """
    header_name = Settings.app['service']['auth_header']
    actor_id = request.headers.get(header_name)
    request.ctx.actor_id = actor_id.strip() if actor_id and actor_id.strip() else None
    if request.ctx.actor_id is None:
        logger.debug(f'no {header_name} header in request to {request.path}')
