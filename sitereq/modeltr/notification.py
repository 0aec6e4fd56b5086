from .base import trString, trTimestamp, trBool
from .document import Document


class Notification(Document):
    user_id = trString
    titre = trString
    message = trString
    lu = trBool
    created_at = trTimestamp
    demande_id = trString
    projet_id = trString
