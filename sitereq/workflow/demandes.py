import datetime
import logging

import sitereq.modeltr as data
from sitereq.modeltr.enums import DemandeStatus, DemandeType
from sitereq.settings import Settings
from .errors import Forbidden, NotFound, BadRequest

logger = logging.getLogger(__name__)


def can_view(actor, demande) -> bool:
    return actor.can_see_projet(demande.projet_id) or demande.is_owned_by(actor)


def visible_demandes(store, actor, status=None, projet_id=None):
    query = {}
    if status is not None:
        try:
            query['status'] = DemandeStatus(status)
        except ValueError:
            raise BadRequest(f'Statut inconnu: {status}')
    if projet_id is not None:
        query['projet_id'] = projet_id
    return [demande for demande in store.get(data.Demande, query) if can_view(actor, demande)]


def get_demande(store, actor, demande_id):
    demande = store.get_by_id(data.Demande, demande_id)
    if demande is None:
        raise NotFound('Demande non trouvée')
    if not can_view(actor, demande):
        raise Forbidden('Accès non autorisé')
    return demande


def next_numero(store, now):
    prefix = Settings.app['workflow'].get('numero_prefix', 'DA')
    count = len(store.list(data.Demande))
    return f'{prefix}-{now.year}-{count + 1:04d}'


def create_demande(store, actor, payload, now=None):
    """
    Creates a draft demande authored by the acting user
    """
    now = now or datetime.datetime.now()
    if not isinstance(payload, dict):
        raise BadRequest('Données invalides')

    projet_id = payload.get('projet_id')
    if not projet_id or not isinstance(projet_id, str):
        raise BadRequest('Données invalides')
    try:
        demande_type = DemandeType(payload.get('type'))
    except ValueError:
        raise BadRequest('Type de demande invalide')
    commentaire = payload.get('commentaire')
    if commentaire is not None and not isinstance(commentaire, str):
        raise BadRequest('Données invalides')

    projet = store.get_by_id(data.Projet, projet_id)
    if projet is None:
        raise NotFound('Projet non trouvé')
    if not projet.actif:
        raise BadRequest('Projet inactif')
    if not actor.can_see_projet(projet.id):
        raise Forbidden('Action non autorisée')

    demande = data.Demande(
        numero=next_numero(store, now),
        type=demande_type,
        technicien_id=actor.id,
        projet_id=projet.id,
        status=DemandeStatus.BROUILLON,
        commentaire=commentaire,
        date_creation=now,
    )
    store.save(demande, now)
    logger.info(f'demande {demande.id} ({demande.numero}) created by user {actor.id} on projet {projet.id}')
    return demande
