import collections
import datetime
import logging
import numbers
import uuid

import sitereq.modeltr as data
from sitereq.modeltr.enums import DemandeAction
from sitereq.settings import Settings
from sitereq.stats import stats_increment_metric_action
from . import rules
from .errors import Unauthenticated, Forbidden, NotFound, BadRequest

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = 'Mise à jour de demande'

SIGNATURE_FIELDS = {
    DemandeAction.VALIDER_MATERIEL: 'validation_conducteur',
    DemandeAction.VALIDER_OUTILLAGE: 'validation_qhse',
    DemandeAction.VALIDER_PREPARATION: 'validation_charge_affaire',
    DemandeAction.VALIDATION_FINALE: 'validation_finale',
}


class ActionResult(collections.namedtuple('ActionResult', ['demande', 'notification', 'history_entry'])):

    def to_dict(self):
        return {
            'demande': self.demande.to_dict(with_id=True),
            'notification': self.notification.to_dict(with_id=True),
            'historyEntry': self.history_entry.to_dict(with_id=True),
        }


def resolve_actor(store, actor_id):
    if not actor_id:
        raise Unauthenticated('Non authentifié')
    actor = store.get_by_id(data.User, actor_id)
    if actor is None:
        raise Unauthenticated('Utilisateur non trouvé')
    return actor


def _epoch_ms(moment):
    return int(moment.timestamp() * 1000)


def parse_quantities(payload):
    """
    Extracts released quantities from an action payload, None when the payload has none
    """
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise BadRequest('Données invalides')
    quantities = payload.get('quantites_sorties')
    if quantities is None:
        return None
    if not isinstance(quantities, dict):
        raise BadRequest('Données invalides')
    for reference, quantity in quantities.items():
        if isinstance(quantity, bool) or not isinstance(quantity, numbers.Real) or quantity < 0:
            raise BadRequest(f'Quantité invalide pour {reference}')
    return dict(quantities)


class ActionDispatcher(object):
    """
    Runs one workflow action on a demande.

    Every check happens before the single write of the demande, a refused action
    leaves the stored demande untouched.
    """

    def __init__(self, store, clock=datetime.datetime.now, window_minutes=None):
        self.store = store
        self.clock = clock
        if window_minutes is None:
            window_minutes = Settings.app['workflow'].get(
                'sortie_modification_minutes', rules.DEFAULT_SORTIE_MODIFICATION_MINUTES
            )
        self.window_minutes = window_minutes

    def execute(self, demande_id, actor_id, action_name, commentaire=None, payload=None):
        actor = resolve_actor(self.store, actor_id)

        demande = self.store.get_by_id(data.Demande, demande_id)
        if demande is None:
            raise NotFound('Demande non trouvée')

        action = DemandeAction.parse(action_name)
        if action is None:
            stats_increment_metric_action('unknown', 'bad_request')
            raise BadRequest('Action non reconnue')

        now = self.clock()
        self.__check_permission(action, demande, actor, now)
        if commentaire is not None and not isinstance(commentaire, str):
            raise BadRequest('Données invalides')
        quantities = parse_quantities(payload)

        rule = rules.RULES[action]
        updates = self.__compute_updates(action, demande, actor, commentaire, quantities, now)
        previous_status = demande.status
        new_status = rule.to_status or previous_status

        updated = demande.merged({**updates, 'status': new_status})
        self.store.save(updated, now)

        logger.info(
            f'demande {updated.id} ({updated.numero}): {action} by user {actor.id}, '
            f'{previous_status} -> {new_status}'
        )
        stats_increment_metric_action(str(action), 'success')

        return ActionResult(
            demande=updated,
            notification=self.__notification(updated, action, now),
            history_entry=self.__history_entry(updated, actor, action, previous_status, new_status, commentaire, now),
        )

    def __check_permission(self, action, demande, actor, now):
        allowed = rules.is_allowed(
            action,
            demande.status,
            actor.role,
            actor.is_member_of(demande.projet_id),
            demande.is_owned_by(actor),
            demande.type,
        )
        if action is DemandeAction.MODIFIER_SORTIE:
            if not (allowed and rules.can_modify_sortie(demande.sortie_appro, now, self.window_minutes)):
                logger.warning(f'modifier_sortie refused on demande {demande.id} for user {actor.id}')
                stats_increment_metric_action(str(action), 'forbidden')
                raise Forbidden('Modification non autorisée ou délai dépassé')
        elif not allowed:
            logger.warning(
                f'{action} refused on demande {demande.id} ({demande.status}) '
                f'for user {actor.id} ({actor.role})'
            )
            stats_increment_metric_action(str(action), 'forbidden')
            raise Forbidden('Action non autorisée')

    def __compute_updates(self, action, demande, actor, commentaire, quantities, now):
        updates = {}
        rule = rules.RULES[action]

        if action in SIGNATURE_FIELDS:
            updates[SIGNATURE_FIELDS[action]] = data.ValidationSignature.create(
                actor, rule.signature_action, now, commentaire
            )

        if action is DemandeAction.REJETER:
            updates['rejet_motif'] = commentaire

        elif action is DemandeAction.PREPARER_SORTIE:
            updates['sortie_appro'] = data.SortieSignature.create(
                actor,
                rule.signature_action,
                now,
                commentaire,
                quantites_sorties=quantities or {},
                modifiable=True,
                date_modification_limite=rules.sortie_deadline(now, self.window_minutes),
            )
            updates['date_sortie'] = now

        elif action is DemandeAction.MODIFIER_SORTIE:
            changes = {'commentaire': commentaire or demande.sortie_appro.commentaire}
            if quantities is not None:
                changes['quantites_sorties'] = quantities
            updates['sortie_appro'] = demande.sortie_appro.merged(changes)

        elif action is DemandeAction.VALIDER_PREPARATION:
            # the exit record is frozen once the preparation is validated
            if demande.sortie_appro is not None:
                updates['sortie_appro'] = demande.sortie_appro.merged({'modifiable': False})

        elif action is DemandeAction.VALIDATION_FINALE:
            updates['date_validation_finale'] = now

        return updates

    @staticmethod
    def __notification(demande, action, now):
        return data.Notification(
            id=uuid.uuid4().hex,
            user_id=demande.technicien_id,
            titre=NOTIFICATION_TITLE,
            message=f'Votre demande {demande.numero} a été {rules.action_label(action)}',
            lu=False,
            created_at=now,
            demande_id=demande.id,
            projet_id=demande.projet_id,
        )

    @staticmethod
    def __history_entry(demande, actor, action, previous_status, new_status, commentaire, now):
        return data.HistoryEntry(
            id=uuid.uuid4().hex,
            demande_id=demande.id,
            user_id=actor.id,
            action=rules.action_label(action),
            ancien_status=previous_status,
            nouveau_status=new_status,
            commentaire=commentaire,
            timestamp=now,
            signature=f'{actor.id}-{_epoch_ms(now)}-{action}',
        )
