import copy
import datetime
import inspect
import logging

from .base import trBase, trId, trEmbedded, trSaveTimestamp
from .enums import StrEnumBase

logger = logging.getLogger(__name__)


class DocumentList(list):

    def __init__(self, items=()):
        self.__logger = logging.getLogger(__name__)
        super().__init__(items)

    def first(self):
        if len(self):
            return self[0]
        else:
            self.__logger.debug('Empty documentlist')
            raise RuntimeError('query yielded no result')


class Document:
    id = trId

    def __init__(self, **kwargs):
        types = {}
        model_types = {}
        document_updated_property = None
        self.__logger = logging.getLogger(__name__)

        if '_defaults' not in type(self).__dict__:
            self._defaults = {}

        for member_name, member_value in inspect.getmembers(type(self)):
            if inspect.isclass(member_value) and issubclass(member_value, trBase):
                # store types of each document entry
                types.update({member_name: member_value._type})
                model_types.update({member_name: member_value})

                if member_value is trSaveTimestamp:
                    document_updated_property = member_name

                # set up default values where available, mutable defaults are never shared
                if member_name in self._defaults:
                    setattr(self, member_name, copy.deepcopy(self._defaults[member_name]))
                else:
                    setattr(self, member_name, copy.deepcopy(member_value._default))

                # set up values defined in constructor
                if member_name in kwargs:
                    setattr(self, member_name, kwargs[member_name])

        self.__types = types
        self.__model_types = model_types
        self.__document_updated_property = document_updated_property
        # check for wrong arguments
        for arg in kwargs:
            if arg not in self.__types:
                raise RuntimeError(f'Unexpected property: {arg} used')

        # setup collection name
        self.collection_name = type(self).__name__.lower()

    def check_types(self):
        for prop, typ in self.__types.items():
            value = getattr(self, prop)
            if value is None and self.__model_types[prop]._optional:
                continue
            prop_type = type(value)
            if prop_type != typ:
                raise ValueError(f'property {prop} has unexpected type: {prop_type} instead of {typ}')
            if isinstance(value, Document):
                value.check_types()

    def has_id(self) -> bool:
        return self.id != trId._default

    def touch(self, now=None):
        if self.__document_updated_property:
            setattr(self, self.__document_updated_property, now or datetime.datetime.now())

    def merged(self, updates):
        """
        Returns a copy of the document with given fields replaced, the original is left untouched
        """
        values = {prop: copy.deepcopy(getattr(self, prop)) for prop in self.__types}
        values.update(updates)
        return type(self)(**values)

    def to_dict(self, with_id=False):
        result = {}
        for prop, typ in self.__types.items():
            output_value = getattr(self, prop)

            # ID is included only on demand
            if prop == 'id':
                if not with_id:
                    continue
            elif output_value is None:
                pass
            # stringify timestamp
            elif isinstance(output_value, datetime.datetime):
                output_value = output_value.isoformat()
            # stringify enum
            elif issubclass(typ, StrEnumBase):
                output_value = output_value.value
            elif isinstance(output_value, Document):
                output_value = output_value.to_dict()

            result[prop] = output_value

        return result

    @classmethod
    def from_dict(cls, values, record_id=None):
        new_document = cls() if record_id is None else cls(id=str(record_id))
        for prop, val in values.items():
            # every field that is stored and is not defined in model will be inaccessible
            if prop not in new_document.__types or prop == 'id':
                continue

            target_type = new_document.__types[prop]
            model_type = new_document.__model_types[prop]

            if val is None:
                setattr(new_document, prop, None)
            # convert str to datetime.datetime instance
            elif target_type == datetime.datetime and isinstance(val, str):
                try:
                    cv = datetime.datetime.fromisoformat(val)
                except ValueError:
                    logger.warning(f'{cls.__name__}.{prop}: unparsable timestamp {val!r}, replaced by datetime.min')
                    cv = datetime.datetime.min
                setattr(new_document, prop, cv)
            # convert strEnums back to instances
            elif issubclass(target_type, StrEnumBase):
                setattr(new_document, prop, target_type(val))
            elif issubclass(model_type, trEmbedded) and isinstance(val, dict):
                setattr(new_document, prop, target_type.from_dict(val))
            else:
                setattr(new_document, prop, val)
        return new_document

    def __repr__(self):
        return f'<{type(self).__name__} {self.id}>'
