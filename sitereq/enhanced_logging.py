import functools
import random
import logging

logger = logging.getLogger(__name__)


def get_random_hash():
    hash = random.getrandbits(32)
    return "{0:08x}".format(hash)


def _prefixed(request, message):
    func_id = getattr(getattr(request, 'ctx', None), 'log_extension', None)
    if isinstance(func_id, str):
        return f'{func_id} {message}'
    return message


def log_d(request, message):
    logger.debug(_prefixed(request, message))


def log_w(request, message):
    logger.warning(_prefixed(request, message))


def log_i(request, message):
    logger.info(_prefixed(request, message))


def log_func_boundaries(func):
    @functools.wraps(func)
    async def inner(request, *args, **kwargs):
        function_name = func.__name__
        func_id = get_random_hash()
        logger.debug(f'func_{func_id}: {function_name} started')
        request.ctx.log_extension = f'func_{func_id}:'
        try:
            return await func(request, *args, **kwargs)
        except Exception as e:
            logger.debug(f'func_{func_id}: {function_name} threw an exception: {e}')
            raise
        finally:
            logger.debug(f'func_{func_id}: {function_name} finished')

    return inner
