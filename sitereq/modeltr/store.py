import copy
import json
import logging
import uuid

from sitereq.settings import Settings, log_to, VERBOSE
from .connection import Connection
from .document import DocumentList

logger = logging.getLogger(__name__)


class DocumentStore(object):
    """
    Storage interface the workflow talks to.

    Queries are flat dictionaries, '_id' matches the document id, any other key
    matches the stored value of the field with the same name.
    """

    def get(self, cls, query):
        raise NotImplementedError()

    def insert(self, doc):
        raise NotImplementedError()

    def replace(self, doc):
        raise NotImplementedError()

    def ping(self) -> bool:
        raise NotImplementedError()

    def get_one(self, cls, query):
        result = self.get(cls, query)
        return result.first() if result else None

    def get_by_id(self, cls, doc_id):
        if doc_id is None:
            return None
        return self.get_one(cls, {'_id': doc_id})

    def list(self, cls):
        return self.get(cls, {})

    def save(self, doc, now=None):
        doc.check_types()
        doc.touch(now)
        if doc.has_id():
            self.replace(doc)
        else:
            self.insert(doc)
        return doc


def _query_value(val):
    if isinstance(val, bool):
        return json.dumps(val)
    return str(val)


class MemoryStore(DocumentStore):
    """
    Keeps documents in process memory, every read and write works on copies
    """

    def __init__(self):
        self.__collections = {}

    def __collection(self, cls):
        return self.__collections.setdefault(cls.__name__.lower(), {})

    @staticmethod
    def __matches(doc, query):
        for key, val in query.items():
            if key == '_id':
                if doc.id != str(val):
                    return False
            elif _query_value(getattr(doc, key, None)) != _query_value(val):
                return False
        return True

    def get(self, cls, query):
        result = DocumentList()
        for doc in self.__collection(cls).values():
            if self.__matches(doc, query):
                result.append(copy.deepcopy(doc))
        return result

    def insert(self, doc):
        if not doc.has_id():
            doc.id = uuid.uuid4().hex
        self.__collection(type(doc))[doc.id] = copy.deepcopy(doc)
        return doc

    def replace(self, doc):
        collection = self.__collection(type(doc))
        if doc.id not in collection:
            raise KeyError(f'{doc.collection_name} {doc.id} does not exist')
        collection[doc.id] = copy.deepcopy(doc)
        return doc

    def ping(self) -> bool:
        return True


class PgStore(DocumentStore):
    """
    Documents kept as json in a single postgres table, one row per document,
    keyed by document type and id; seq keeps the insertion order
    """

    SCHEMA = (
        "CREATE TABLE IF NOT EXISTS documents ("
        "seq bigserial, id varchar(64) NOT NULL, type varchar(64) NOT NULL, data jsonb NOT NULL, "
        "PRIMARY KEY (type, id));"
    )

    def __init__(self, connection):
        self.connection = connection

    def create_schema(self):
        with self.connection as conn:
            conn.get_cursor().execute(self.SCHEMA)

    @staticmethod
    def construct_query(cls, query):
        collection_name = cls.__name__.lower()
        sql_query = "SELECT id, type, data FROM documents where "
        params = []
        for key, val in query.items():
            if key == "_id":
                sql_query += " id = %s and "
                params += [str(val)]
            else:
                sql_query += " data->>%s = %s and "
                params += [key, _query_value(val)]

        sql_query += " type = %s ORDER BY seq"
        params += [collection_name]
        return [sql_query, params]

    @log_to(logger, VERBOSE)
    def get(self, cls, query):
        result = DocumentList()
        sql_query = self.construct_query(cls, query)
        with self.connection as conn:
            cur = conn.get_cursor()
            cur.execute(sql_query[0], sql_query[1])
            for record in cur.fetchall():
                data = record[2] if isinstance(record[2], dict) else json.loads(record[2])
                result.append(cls.from_dict(data, record_id=record[0]))
        return result

    @log_to(logger, VERBOSE)
    def insert(self, doc):
        with self.connection as conn:
            cur = conn.get_cursor()
            if not doc.has_id():
                doc.id = uuid.uuid4().hex
            cur.execute(
                "INSERT INTO documents (id, type, data) VALUES(%s,%s,%s);",
                [doc.id, doc.collection_name, json.dumps(doc.to_dict())]
            )
        return doc

    @log_to(logger, VERBOSE)
    def replace(self, doc):
        with self.connection as conn:
            cur = conn.get_cursor()
            cur.execute(
                "UPDATE documents SET data = %s WHERE id = %s AND type = %s",
                [json.dumps(doc.to_dict()), doc.id, doc.collection_name]
            )
            if cur.rowcount == 0:
                raise KeyError(f'{doc.collection_name} {doc.id} does not exist')
        return doc

    def ping(self) -> bool:
        try:
            with self.connection as conn:
                cur = conn.get_cursor()
                cur.execute("SELECT 1;")
                return cur.fetchone()[0] == 1
        except Exception:
            logger.warning('db ping failed', exc_info=True)
            return False


def build_store(store_settings=None):
    store_settings = store_settings or Settings.app['store']
    backend = store_settings.get('backend', 'memory')
    if backend == 'memory':
        return MemoryStore()
    if backend == 'postgres':
        store = PgStore(Connection(store_settings['dsn']))
        store.create_schema()
        return store
    raise ValueError(f'unknown store backend: {backend}')
