from sanic import Blueprint

import sitereq.enhanced_logging as el
from sitereq.middleware.json_params import get_json_body
from sitereq.middleware.json_response import success
from sitereq.workflow import ActionDispatcher, BadRequest, resolve_actor
from sitereq.workflow.demandes import create_demande, get_demande, visible_demandes

demandes = Blueprint('demandes')


@demandes.route('/demandes/<demande_id>/actions', methods=['POST'])
@el.log_func_boundaries
async def demande_action(request, demande_id):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    params = get_json_body(request)
    el.log_d(request, f"POST /demandes/{demande_id}/actions '{params.get('action')}' wanted by: {actor.id}")
    dispatcher = ActionDispatcher(store)
    result = dispatcher.execute(
        demande_id,
        actor.id,
        params.get('action'),
        commentaire=params.get('commentaire'),
        payload=params.get('data'),
    )
    el.log_d(request, f'demande {demande_id} is now {result.demande.status}')
    return success(result.to_dict())


@demandes.route('/demandes', methods=['POST'])
@el.log_func_boundaries
async def demande_create(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    demande = create_demande(store, actor, get_json_body(request))
    el.log_i(request, f'new demande {demande.id} saved')
    return success(demande.to_dict(with_id=True), status=201)


@demandes.route('/demandes', methods=['GET'])
async def demandes_list(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    for key in request.args.keys():
        if key not in ['status', 'projet_id']:
            raise BadRequest(f'Paramètre inconnu: {key}')
    found = visible_demandes(
        store,
        actor,
        status=request.args.get('status'),
        projet_id=request.args.get('projet_id'),
    )
    return success([demande.to_dict(with_id=True) for demande in found])


@demandes.route('/demandes/<demande_id>', methods=['GET'])
async def demande_get(request, demande_id):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    return success(get_demande(store, actor, demande_id).to_dict(with_id=True))
