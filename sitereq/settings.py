import logging
import functools
import os
from collections.abc import Iterable

import raven
import yaml
from deepmerge import Merger as dm
import statsd
import contextvars


class Settings:
    app = {
            'unit_name': 'sitereq',
            'log_level': 'DEBUG',
            'log_format': '[%(asctime)s] [%(process)d] [%(levelname)s] '
                          '[http:%(http_request_uuid)s] [%(http_verb)s%(http_address)s] '
                          '%(message)s',
            'log_datefmt': '%Y-%m-%dT%H:%M:%S.000Z',
            'sanic_accesslog': True,
            'sanic_debug': False,
            'raven': {
                'dsn': None
            },
            'service': {
                'host': '127.0.0.1',
                'port': 8000,
                'workers': 1,
                'auth_header': 'x-user-id',
                'url_prefix': '/api',
            },
            'store': {
                'backend': 'memory',
                'dsn': None,
            },
            'retries': {
                'db_connection': 6,
                'delay': 0.1,
            },
            'statsd': {
                'host': 'localhost',
                'port': 8125,
                'prefix': None
            },
            'workflow': {
                'sortie_modification_minutes': 45,
                'numero_prefix': 'DA',
            },
            'directory': {
                'users': [],
                'projets': [],
            },
          }

    environ = os.environ.get('ENV', 'development')

    __config_file = os.environ.get('CONFIG', os.path.join(
        os.path.dirname(os.path.abspath(__file__)),
        '../config/sitereq.yaml'
    ))

    raven = None

    statsd_client = None

    @staticmethod
    def __flatten(items):
        """Yield items from any nested iterable; see Reference."""
        for item in items:
            if isinstance(item, Iterable) and not isinstance(item, (str, bytes, dict)):
                for sub_x in Settings.__flatten(item):
                    yield sub_x
            else:
                yield item

    @staticmethod
    def __load_config_file():
        if not os.path.isfile(Settings.__config_file):
            logging.getLogger("settings").warning(
                f"Config file {Settings.__config_file} not found, using defaults"
            )
            return {}
        with open(Settings.__config_file, 'r') as config_file:
            return yaml.safe_load(config_file.read()) or {}

    @staticmethod
    def configure():
        config_file_section = Settings.__load_config_file().get(Settings.environ) or {}
        directory = config_file_section.get('directory', {})
        for key in ('users', 'projets'):
            # yaml anchors may nest lists of entries
            if key in directory:
                directory[key] = list(Settings.__flatten(directory[key]))
        dm(
            [(list, ['override']), (dict, ['merge'])],
            ['override'],
            ['override']
        ).merge(Settings.app, config_file_section)
        Settings.raven = raven.Client(
            dsn=Settings.app['raven']['dsn'],
            ignore_exceptions=[KeyboardInterrupt]
        )
        if Settings.app['statsd']['prefix']:
            try:
                Settings.statsd_client = statsd.StatsClient(
                    Settings.app['statsd']['host'],
                    Settings.app['statsd']['port']
                )
            except Exception:
                logging.getLogger("settings").warning(
                    "Statsd client initialization failed, no stats gonna be sent",
                    exc_info=True
                )
                Settings.statsd_client = None


Settings.configure()

# Define a new log level More detailed than DEBUG
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")


# Add a method to log at the new level
def verbose(self, message, *args, **kwargs):
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


logging.Logger.verbose = verbose

log_level_str = Settings.app['log_level']
env_log_level_str = os.environ.get("SANICAPP_WORKERS_LOG_LEVEL", "None")
if env_log_level_str in ['VERBOSE', 'DEBUG', 'INFO', 'WARNING']:
    log_level_str = env_log_level_str


logging_vars = {
    'http_request_uuid': contextvars.ContextVar('http_request_uuid', default=''),
    'http_verb': contextvars.ContextVar('http_verb', default=''),
    'http_address': contextvars.ContextVar('http_address', default=''),
}


def set_context_var(name, val):
    logging_vars[name].set(val)


def reset_context_var(name):
    logging_vars[name].set('')


logging.basicConfig(
  level=logging.getLevelName(log_level_str),
  format=Settings.app['log_format'],
  datefmt=Settings.app['log_datefmt']
)


old_factory = logging.getLogRecordFactory()
def record_factory(*args, **kwargs):
    record = old_factory(*args, **kwargs)
    record.http_request_uuid = logging_vars['http_request_uuid'].get()
    record.http_verb = logging_vars['http_verb'].get()
    record.http_address = logging_vars['http_address'].get()
    return record
logging.setLogRecordFactory(record_factory)


def log_to(logger: logging.Logger, level=logging.DEBUG):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.log(level=level, msg=f"-> {func.__name__}()")
            result = func(*args, **kwargs)
            logger.log(level=level, msg=f"<- {func.__name__}(): {repr(result)}")
            return result
        return wrapper
    return decorator
