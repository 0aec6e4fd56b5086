import logging

from sanic import Sanic
from sanic.exceptions import SanicException
from sanic.handlers import ErrorHandler

import sitereq.middleware.auth
import sitereq.middleware.json_params
import sitereq.middleware.log_context
import sitereq.module.demandes
import sitereq.module.projets
import sitereq.module.uptime
import sitereq.module.users
import sitereq.modeltr as data
from sitereq.middleware.json_response import failure
from sitereq.settings import Settings as settings
from sitereq.stats import stats_increment_metric
from sitereq.workflow import WorkflowError

logger = logging.getLogger()


class SiteReqErrorHandler(ErrorHandler):
    def default(self, request, exception):
        if isinstance(exception, WorkflowError):
            return failure(exception.message, exception.status)

        if isinstance(exception, SanicException):
            return failure(str(exception), getattr(exception, 'status_code', 500))

        # anything else is a bug, details stay in the logs
        logger.error(
            f'Unexpected exception when handling {request.method} {request.path}',
            exc_info=(type(exception), exception, exception.__traceback__)
        )
        settings.raven.captureException(exc_info=(type(exception), exception, exception.__traceback__))
        stats_increment_metric('http', 'internal_error')
        return failure('Erreur serveur', 500)


sitereq_webserver = Sanic('sitereq', error_handler=SiteReqErrorHandler())

sitereq_webserver.register_middleware(sitereq.middleware.log_context.bind_log_context, 'request')
sitereq_webserver.register_middleware(sitereq.middleware.auth.auth, 'request')
sitereq_webserver.register_middleware(sitereq.middleware.json_params.json_params, 'request')

url_prefix = settings.app['service']['url_prefix']
sitereq_webserver.blueprint(sitereq.module.demandes.demandes, url_prefix=url_prefix)
sitereq_webserver.blueprint(sitereq.module.projets.projets, url_prefix=url_prefix)
sitereq_webserver.blueprint(sitereq.module.users.users, url_prefix=url_prefix)
sitereq_webserver.blueprint(sitereq.module.uptime.uptime)

sitereq_webserver.register_middleware(sitereq.middleware.log_context.release_log_context, 'response')


@sitereq_webserver.listener("before_server_start")
async def create_store(app, loop):
    logger.debug(f"before_server_start, store backend: {settings.app['store']['backend']}")
    app.ctx.store = data.build_store()
    data.load_directory(app.ctx.store, settings.app['directory'])
