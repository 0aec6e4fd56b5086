from sanic.response import json as sanic_json


def success(payload, status=200):
    return sanic_json(
        {
            'success': True,
            'data': payload,
        },
        status=status
    )


def failure(error, status):
    return sanic_json(
        {
            'success': False,
            'error': error,
        },
        status=status
    )
