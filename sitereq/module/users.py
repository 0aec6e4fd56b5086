from sanic import Blueprint

import sitereq.enhanced_logging as el
from sitereq.middleware.json_params import get_json_body
from sitereq.middleware.json_response import success
from sitereq.workflow import resolve_actor
from sitereq.workflow.users import create_user, list_users

users = Blueprint('users')


@users.route('/users', methods=['GET'])
async def users_list(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    return success([user.to_dict(with_id=True) for user in list_users(store, actor)])


@users.route('/users', methods=['POST'])
@el.log_func_boundaries
async def user_create(request):
    store = request.app.ctx.store
    actor = resolve_actor(store, request.ctx.actor_id)
    el.log_d(request, f'POST /users wanted by: {actor.id}')
    user = create_user(store, actor, get_json_body(request))
    el.log_i(request, f'new user {user.id} saved')
    return success(user.to_dict(with_id=True), status=201)
