import datetime
import logging

import sitereq.modeltr as data
from sitereq.modeltr.enums import Role
from .errors import Forbidden, BadRequest

logger = logging.getLogger(__name__)


def visible_projets(store, actor):
    projets = store.list(data.Projet)
    if actor.role is not Role.SUPERADMIN:
        projets = [
            projet for projet in projets
            if projet.created_by == actor.id or actor.is_member_of(projet.id)
        ]
    return sorted(projets, key=lambda projet: projet.created_at or datetime.datetime.min, reverse=True)


def check_payload_projet(payload):
    if not isinstance(payload, dict):
        raise BadRequest('Données invalides')

    nom = payload.get('nom')
    if not isinstance(nom, str) or not nom.strip():
        raise BadRequest('Données invalides')

    description = payload.get('description')
    if description is not None and not isinstance(description, str):
        raise BadRequest('Données invalides')

    try:
        date_debut = data.to_datetime(payload.get('date_debut'))
        date_fin = data.to_datetime(payload.get('date_fin'))
    except (TypeError, ValueError):
        raise BadRequest('Données invalides')
    if date_debut is None:
        raise BadRequest('Données invalides')
    if date_fin is not None and date_fin <= date_debut:
        raise BadRequest('La date de fin doit être postérieure à la date de début')

    utilisateurs = payload.get('utilisateurs') or []
    if not isinstance(utilisateurs, list) or not all(isinstance(u, str) for u in utilisateurs):
        raise BadRequest('Données invalides')

    return {
        'nom': nom.strip(),
        'description': description,
        'date_debut': date_debut,
        'date_fin': date_fin,
        'utilisateurs': list(dict.fromkeys(utilisateurs)),
    }


def create_projet(store, actor, payload, now=None):
    """
    Creates an active project owned by a superadmin and attaches the listed users to it
    """
    if actor.role is not Role.SUPERADMIN:
        raise Forbidden('Permissions insuffisantes')
    now = now or datetime.datetime.now()
    values = check_payload_projet(payload)

    members = []
    for user_id in values['utilisateurs']:
        user = store.get_by_id(data.User, user_id)
        if user is None:
            raise BadRequest(f'Utilisateur inconnu: {user_id}')
        members.append(user)

    projet = data.Projet(
        nom=values['nom'],
        description=values['description'],
        date_debut=values['date_debut'],
        date_fin=values['date_fin'],
        created_by=actor.id,
        actif=True,
        utilisateurs=[user.id for user in members],
        created_at=now,
    )
    store.save(projet, now)

    for user in members:
        if not user.is_member_of(projet.id):
            user.projets.append(projet.id)
            store.save(user, now)

    logger.info(f'projet {projet.id} created by user {actor.id} with {len(members)} member(s)')
    return projet
