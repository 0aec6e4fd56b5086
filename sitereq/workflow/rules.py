import collections
import datetime

from sitereq.modeltr.enums import DemandeAction, DemandeStatus, DemandeType, Role

# who, besides the role, may run an action
SCOPE_PROJECT = 'project'  # members of the demande's project, superadmin always passes
SCOPE_OWNER = 'owner'      # the technician who authored the demande
SCOPE_GLOBAL = 'global'    # role alone decides

DEFAULT_SORTIE_MODIFICATION_MINUTES = 45

ActionRule = collections.namedtuple(
    'ActionRule',
    ['from_statuses', 'to_status', 'roles', 'scope', 'signature_action']
)


def _same_for_all_types(*roles):
    return {demande_type: frozenset(roles) for demande_type in DemandeType}


RULES = {
    DemandeAction.SOUMETTRE: ActionRule(
        from_statuses=frozenset([DemandeStatus.BROUILLON]),
        to_status=DemandeStatus.SOUMISE,
        roles=None,
        scope=SCOPE_OWNER,
        signature_action=None,
    ),
    DemandeAction.VALIDER_MATERIEL: ActionRule(
        from_statuses=frozenset([DemandeStatus.SOUMISE]),
        to_status=DemandeStatus.VALIDEE_CONDUCTEUR,
        roles={
            DemandeType.MATERIEL: frozenset([Role.CONDUCTEUR_TRAVAUX]),
            DemandeType.OUTILLAGE: frozenset(),
        },
        scope=SCOPE_PROJECT,
        signature_action='validation_materiel',
    ),
    DemandeAction.VALIDER_OUTILLAGE: ActionRule(
        from_statuses=frozenset([DemandeStatus.SOUMISE]),
        to_status=DemandeStatus.VALIDEE_QHSE,
        roles={
            DemandeType.MATERIEL: frozenset(),
            DemandeType.OUTILLAGE: frozenset([Role.RESPONSABLE_QHSE]),
        },
        scope=SCOPE_PROJECT,
        signature_action='validation_outillage',
    ),
    DemandeAction.REJETER: ActionRule(
        from_statuses=frozenset([DemandeStatus.SOUMISE]),
        to_status=DemandeStatus.REJETEE,
        roles={
            DemandeType.MATERIEL: frozenset([Role.CONDUCTEUR_TRAVAUX, Role.SUPERADMIN]),
            DemandeType.OUTILLAGE: frozenset([Role.RESPONSABLE_QHSE, Role.SUPERADMIN]),
        },
        scope=SCOPE_PROJECT,
        signature_action=None,
    ),
    DemandeAction.PREPARER_SORTIE: ActionRule(
        from_statuses=frozenset([DemandeStatus.VALIDEE_CONDUCTEUR, DemandeStatus.VALIDEE_QHSE]),
        to_status=DemandeStatus.SORTIE_PREPAREE,
        roles=_same_for_all_types(Role.RESPONSABLE_APPRO),
        scope=SCOPE_PROJECT,
        signature_action='preparation_sortie',
    ),
    DemandeAction.MODIFIER_SORTIE: ActionRule(
        from_statuses=frozenset([DemandeStatus.SORTIE_PREPAREE]),
        to_status=None,
        roles=_same_for_all_types(Role.RESPONSABLE_APPRO),
        scope=SCOPE_PROJECT,
        signature_action=None,
    ),
    DemandeAction.VALIDER_PREPARATION: ActionRule(
        from_statuses=frozenset([DemandeStatus.SORTIE_PREPAREE]),
        to_status=DemandeStatus.VALIDEE_CHARGE_AFFAIRE,
        roles=_same_for_all_types(Role.CHARGE_AFFAIRE),
        scope=SCOPE_PROJECT,
        signature_action='validation_preparation',
    ),
    DemandeAction.VALIDATION_FINALE: ActionRule(
        from_statuses=frozenset([DemandeStatus.VALIDEE_CHARGE_AFFAIRE]),
        to_status=DemandeStatus.VALIDEE_FINALE,
        roles=_same_for_all_types(Role.TECHNICIEN),
        scope=SCOPE_OWNER,
        signature_action='validation_finale',
    ),
    DemandeAction.ARCHIVER: ActionRule(
        from_statuses=frozenset([DemandeStatus.VALIDEE_FINALE]),
        to_status=DemandeStatus.ARCHIVEE,
        roles=_same_for_all_types(Role.SUPERADMIN),
        scope=SCOPE_GLOBAL,
        signature_action=None,
    ),
}

ACTION_LABELS = {
    DemandeAction.SOUMETTRE: 'soumise',
    DemandeAction.VALIDER_MATERIEL: 'validée par le conducteur',
    DemandeAction.VALIDER_OUTILLAGE: 'validée par le responsable QHSE',
    DemandeAction.REJETER: 'rejetée',
    DemandeAction.PREPARER_SORTIE: 'préparée pour sortie',
    DemandeAction.MODIFIER_SORTIE: 'modifiée',
    DemandeAction.VALIDER_PREPARATION: "validée par le chargé d'affaire",
    DemandeAction.VALIDATION_FINALE: 'validée définitivement',
    DemandeAction.ARCHIVER: 'archivée',
}

DEFAULT_ACTION_LABEL = 'mise à jour'


def action_label(action) -> str:
    return ACTION_LABELS.get(DemandeAction.parse(str(action)), DEFAULT_ACTION_LABEL)


def is_allowed(action, status, role, is_member, is_owner, demande_type) -> bool:
    """
    Pure permission check for one action.

    :param action: DemandeAction to run
    :param status: current DemandeStatus of the demande
    :param role: Role of the acting user
    :param is_member: actor is attached to the demande's project
    :param is_owner: actor is the technician who authored the demande
    :param demande_type: DemandeType of the demande
    :return: bool
    """
    rule = RULES.get(action)
    if rule is None or status.is_terminal():
        return False

    if status not in rule.from_statuses:
        return False

    if rule.roles is not None and role not in rule.roles[demande_type]:
        return False

    if rule.scope == SCOPE_PROJECT:
        return role is Role.SUPERADMIN or is_member
    if rule.scope == SCOPE_OWNER:
        return is_owner
    return True


def sortie_deadline(prepared_at, window_minutes=DEFAULT_SORTIE_MODIFICATION_MINUTES):
    return prepared_at + datetime.timedelta(minutes=window_minutes)


def can_modify_sortie(sortie, now, window_minutes=DEFAULT_SORTIE_MODIFICATION_MINUTES) -> bool:
    """
    An exit record stays editable while it is flagged modifiable and no more than
    window_minutes have elapsed since it was recorded, the bound itself included
    """
    if sortie is None or not sortie.modifiable:
        return False
    elapsed_minutes = (now - sortie.date).total_seconds() / 60
    return elapsed_minutes <= window_minutes
