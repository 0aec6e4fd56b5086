from .base import trString, trList, trRole
from .document import Document


class User(Document):
    nom = trString
    prenom = trString
    email = trString
    role = trRole
    projets = trList

    def is_member_of(self, projet_id) -> bool:
        return projet_id in self.projets

    def can_see_projet(self, projet_id) -> bool:
        return self.role.is_superadmin() or self.is_member_of(projet_id)
