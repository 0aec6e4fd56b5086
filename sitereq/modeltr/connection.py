import logging
import time

import psycopg2

from sitereq.settings import Settings


class StoreConnectionError(Exception):
    pass


class Connection(object):
    """
    Synchronous psycopg2 connection used as a transaction scope:
    entering the block opens a transaction, leaving it commits, or rolls back on exception
    """

    def __init__(self, dsn, connect=psycopg2.connect):
        self.__logger = logging.getLogger(__name__)
        self._dsn = dsn
        self._connect_func = connect
        self.client = None

    def __enter__(self):
        if self.client is None or self.client.closed:
            self._connect()
            self.__logger.debug("db connection CONNECTED")
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        if exc_traceback is None:
            self.client.commit()
            return
        self.__logger.warning(
            'Exception occurred when working with Connection, rolling back',
            exc_info=(exc_type, exc_value, exc_traceback)
        )
        try:
            self.client.rollback()
        except psycopg2.Error as ex:
            self.__logger.warning(f'Exception occurred when rolling back: {repr(ex)}')

    def _connect(self):
        retries = Settings.app['retries']['db_connection']
        for attempt in range(retries):
            try:
                self.client = self._connect_func(self._dsn)
                return
            except psycopg2.OperationalError:
                self.__logger.warning(
                    f'Error connecting to the db server, attempt {attempt + 1}/{retries}',
                    exc_info=True
                )
                time.sleep(Settings.app['retries']['delay'])
        raise StoreConnectionError(f'could not connect to the db server after {retries} attempts')

    def get_cursor(self):
        return self.client.cursor()

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
