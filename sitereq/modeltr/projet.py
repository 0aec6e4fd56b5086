from .base import trString, trOptionalString, trTimestamp, trBool, trList
from .document import Document


class Projet(Document):
    nom = trString
    description = trOptionalString
    date_debut = trTimestamp
    date_fin = trTimestamp
    created_by = trString
    actif = trBool
    utilisateurs = trList
    created_at = trTimestamp

    _defaults = {
        'actif': True,
    }
