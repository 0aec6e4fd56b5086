import datetime
import logging

from .enums import Role
from .projet import Projet
from .user import User

logger = logging.getLogger(__name__)


def to_datetime(value):
    """
    Accepts datetime, date or ISO formatted strings, returns None for empty values
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    parsed = datetime.datetime.fromisoformat(str(value))
    if parsed.tzinfo is not None:
        # timestamps are kept naive in local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def load_directory(store, directory):
    """
    Fills the store with users and projects listed in the configuration,
    entries already present are left untouched
    """
    for entry in directory.get('users', []):
        if store.get_by_id(User, str(entry['id'])):
            continue
        user = User(
            id=str(entry['id']),
            nom=entry.get('nom', ''),
            prenom=entry.get('prenom', ''),
            email=entry.get('email', ''),
            role=Role(entry['role']),
            projets=[str(p) for p in entry.get('projets', [])],
        )
        user.check_types()
        store.insert(user)
        logger.debug(f'user {user.id} ({user.role}) loaded into the store')

    for entry in directory.get('projets', []):
        if store.get_by_id(Projet, str(entry['id'])):
            continue
        projet = Projet(
            id=str(entry['id']),
            nom=entry['nom'],
            description=entry.get('description'),
            date_debut=to_datetime(entry.get('date_debut')),
            date_fin=to_datetime(entry.get('date_fin')),
            created_by=str(entry.get('created_by', '')),
            actif=bool(entry.get('actif', True)),
            utilisateurs=[str(u) for u in entry.get('utilisateurs', [])],
            created_at=to_datetime(entry.get('created_at')) or datetime.datetime.now(),
        )
        projet.check_types()
        store.insert(projet)
        logger.debug(f'projet {projet.id} loaded into the store')
