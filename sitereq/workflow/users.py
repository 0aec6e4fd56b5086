import datetime
import logging

import sitereq.modeltr as data
from sitereq.modeltr.enums import Role
from .errors import Forbidden, BadRequest

logger = logging.getLogger(__name__)


def check_superadmin(actor):
    if not actor.role.is_superadmin():
        raise Forbidden('Permissions insuffisantes')


def list_users(store, actor):
    check_superadmin(actor)
    return store.list(data.User)


def check_payload_user(payload):
    if not isinstance(payload, dict):
        raise BadRequest('Données invalides')

    values = {}
    for key in ('nom', 'prenom', 'email'):
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            raise BadRequest('Données invalides')
        values[key] = value.strip()
    if '@' not in values['email']:
        raise BadRequest('Email invalide')

    try:
        values['role'] = Role(payload.get('role'))
    except ValueError:
        raise BadRequest('Rôle invalide')

    projets = payload.get('projets') or []
    if not isinstance(projets, list) or not all(isinstance(p, str) for p in projets):
        raise BadRequest('Données invalides')
    values['projets'] = list(dict.fromkeys(projets))
    return values


def create_user(store, actor, payload, now=None):
    """
    Adds a user to the directory and attaches it to the listed projects
    """
    check_superadmin(actor)
    now = now or datetime.datetime.now()
    values = check_payload_user(payload)

    email = values['email'].lower()
    if any(user.email.lower() == email for user in store.list(data.User)):
        raise BadRequest('Email déjà utilisé')

    projets = []
    for projet_id in values['projets']:
        projet = store.get_by_id(data.Projet, projet_id)
        if projet is None:
            raise BadRequest(f'Projet inconnu: {projet_id}')
        projets.append(projet)

    user = data.User(
        nom=values['nom'],
        prenom=values['prenom'],
        email=values['email'],
        role=values['role'],
        projets=[projet.id for projet in projets],
    )
    store.save(user, now)

    for projet in projets:
        if user.id not in projet.utilisateurs:
            projet.utilisateurs.append(user.id)
            store.save(projet, now)

    logger.info(f'user {user.id} ({user.role}) created by user {actor.id} in {len(projets)} projet(s)')
    return user
