from sanic import Blueprint

import sitereq.enhanced_logging as el
from sitereq.middleware.json_params import get_json_body
from sitereq.middleware.json_response import success
from sitereq.workflow import resolve_actor
from sitereq.workflow.projets import create_projet, visible_projets

projets = Blueprint('projets')


@projets.route('/projets', methods=['GET'])
async def projets_list(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    return success([projet.to_dict(with_id=True) for projet in visible_projets(store, actor)])


@projets.route('/projets', methods=['POST'])
@el.log_func_boundaries
async def projet_create(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    el.log_d(request, f'POST /projets wanted by: {actor.id}')
    projet = create_projet(store, actor, get_json_body(request))
    el.log_i(request, f'new projet {projet.id} saved')
    return success(projet.to_dict(with_id=True), status=201)
