from .base import trString, trOptionalString, trSaveTimestamp, trTimestamp, trEmbedded, \
    trDemandeStatus, trDemandeType
from .enums import DemandeStatus
from .document import Document
from .signature import ValidationSignature, SortieSignature


class trValidation(trEmbedded):
    _type = ValidationSignature


class trSortie(trEmbedded):
    _type = SortieSignature


class Demande(Document):
    numero = trString
    type = trDemandeType
    technicien_id = trString
    projet_id = trString
    status = trDemandeStatus
    commentaire = trOptionalString
    validation_conducteur = trValidation
    validation_qhse = trValidation
    validation_charge_affaire = trValidation
    validation_finale = trValidation
    rejet_motif = trOptionalString
    sortie_appro = trSortie
    date_sortie = trTimestamp
    date_validation_finale = trTimestamp
    date_creation = trTimestamp
    date_modification = trSaveTimestamp

    _defaults = {
                    'status': DemandeStatus.BROUILLON
                }

    def is_owned_by(self, user) -> bool:
        return self.technicien_id == user.id
