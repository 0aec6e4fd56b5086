import logging
import json

import sitereq.enhanced_logging as el
from sitereq.workflow import BadRequest

logger = logging.getLogger()

# set instead of the parsed body when it could not be decoded
MALFORMED_JSON = object()


async def json_params(request):
    request.ctx.json_params = {}
    if not request.headers.get('content-type', '').startswith('application/json'):
        return
    if not request.body:
        return
    try:
        request.ctx.json_params = json.loads(request.body)
    except ValueError as ex:
        logger.warning(f"Exception occurred when handling json params: {repr(ex)}")
        request.ctx.json_params = MALFORMED_JSON


def get_json_body(request):
    """
    Body of the request as a json object, handlers call it once the actor is known
    """
    params = request.ctx.json_params
    if params is MALFORMED_JSON:
        el.log_w(request, 'refusing malformed json body')
        raise BadRequest('JSON invalide')
    if not isinstance(params, dict):
        el.log_w(request, f'refusing json body of type {type(params).__name__}')
        raise BadRequest('Données invalides')
    return params
