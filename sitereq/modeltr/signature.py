from .base import trString, trOptionalString, trTimestamp, trDict, trBool
from .document import Document


class ValidationSignature(Document):
    """
    Audit marker left on a demande by each validating user, the signature
    string is a plain breadcrumb and proves nothing
    """
    user_id = trString
    date = trTimestamp
    commentaire = trOptionalString
    signature = trString

    @classmethod
    def create(cls, user, signature_action, now, commentaire=None, **kwargs):
        epoch_ms = int(now.timestamp() * 1000)
        return cls(
            user_id=user.id,
            date=now,
            commentaire=commentaire,
            signature=f'{user.id}-{signature_action}-{epoch_ms}',
            **kwargs
        )


class SortieSignature(ValidationSignature):
    quantites_sorties = trDict
    modifiable = trBool
    date_modification_limite = trTimestamp

    _defaults = {
        'quantites_sorties': {},
        'modifiable': True,
    }
