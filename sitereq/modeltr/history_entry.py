from .base import trString, trOptionalString, trTimestamp, trDemandeStatus
from .document import Document


class HistoryEntry(Document):
    demande_id = trString
    user_id = trString
    action = trString
    ancien_status = trDemandeStatus
    nouveau_status = trDemandeStatus
    commentaire = trOptionalString
    timestamp = trTimestamp
    signature = trString
