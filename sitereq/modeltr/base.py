import datetime
from .enums import DemandeStatus, DemandeType, Role

__all__ = [
            'trBase',
            'trString',
            'trOptionalString',
            'trList',
            'trDict',
            'trId',
            'trBool',
            'trSaveTimestamp',
            'trTimestamp',
            'trEmbedded',
            'trDemandeStatus',
            'trDemandeType',
            'trRole',
]


class trBase(object):
    _default = None
    _type = type(None)
    _optional = False


class trString(trBase):
    _default = ''
    _type = type(_default)


class trOptionalString(trBase):
    _default = None
    _type = str
    _optional = True


class trBool(trBase):
    _default = False
    _type = type(_default)


class trId(trBase):
    _default = '<null>'
    _type = type(_default)


class trList(trBase):
    _default = []
    _type = type(_default)


class trDict(trBase):
    _default = {}
    _type = type(_default)


class trSaveTimestamp(trBase):
    _default = None
    _type = datetime.datetime
    _optional = True


class trTimestamp(trBase):
    _default = None
    _type = datetime.datetime
    _optional = True


class trEmbedded(trBase):
    """
    Holds another Document; subclasses set _type to the embedded Document class
    """
    _default = None
    _optional = True

# ------------- enums ---------------


class trDemandeStatus(trBase):
    _default = DemandeStatus.BROUILLON
    _type = DemandeStatus


class trDemandeType(trBase):
    _default = DemandeType.MATERIEL
    _type = DemandeType


class trRole(trBase):
    _default = Role.TECHNICIEN
    _type = Role
