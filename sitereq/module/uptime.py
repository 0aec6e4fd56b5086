import datetime
import socket

import sanic.response
from sanic import Blueprint

uptime = Blueprint('uptime')


def _now_info():
    return {
        'current_time': datetime.datetime.now().strftime("%Y-%m-%d, %H:%M:%S"),
        'timezone': str(datetime.datetime.now(datetime.timezone.utc).astimezone().tzinfo),
        'host': socket.gethostname(),
    }


@uptime.route('/uptime')
async def uptime_func(request):
    return sanic.response.json(_now_info(), status=200)


@uptime.route('/storeuptime')
async def storeuptime_func(request):
    store_ok = request.app.ctx.store.ping()
    return sanic.response.json({**_now_info(), 'store': store_ok}, status=200 if store_ok else 503)
