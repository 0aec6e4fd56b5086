import datetime
import itertools
import os
os.environ.setdefault('ENV', 'test')

from mamba import description, context, it
from expects import *

from sitereq.modeltr import SortieSignature
from sitereq.modeltr.enums import DemandeAction, DemandeStatus, DemandeType, Role
from sitereq.workflow import rules

ANY = object()

S = DemandeStatus
R = Role
T = DemandeType

# (status, roles, is_member, is_owner, type) patterns, ANY matches everything
ALLOWED = {
    DemandeAction.SOUMETTRE: [
        (S.BROUILLON, ANY, ANY, True, ANY),
    ],
    DemandeAction.VALIDER_MATERIEL: [
        (S.SOUMISE, {R.CONDUCTEUR_TRAVAUX}, True, ANY, T.MATERIEL),
    ],
    DemandeAction.VALIDER_OUTILLAGE: [
        (S.SOUMISE, {R.RESPONSABLE_QHSE}, True, ANY, T.OUTILLAGE),
    ],
    DemandeAction.REJETER: [
        (S.SOUMISE, {R.CONDUCTEUR_TRAVAUX}, True, ANY, T.MATERIEL),
        (S.SOUMISE, {R.RESPONSABLE_QHSE}, True, ANY, T.OUTILLAGE),
        (S.SOUMISE, {R.SUPERADMIN}, ANY, ANY, ANY),
    ],
    DemandeAction.PREPARER_SORTIE: [
        (S.VALIDEE_CONDUCTEUR, {R.RESPONSABLE_APPRO}, True, ANY, ANY),
        (S.VALIDEE_QHSE, {R.RESPONSABLE_APPRO}, True, ANY, ANY),
    ],
    DemandeAction.MODIFIER_SORTIE: [
        (S.SORTIE_PREPAREE, {R.RESPONSABLE_APPRO}, True, ANY, ANY),
    ],
    DemandeAction.VALIDER_PREPARATION: [
        (S.SORTIE_PREPAREE, {R.CHARGE_AFFAIRE}, True, ANY, ANY),
    ],
    DemandeAction.VALIDATION_FINALE: [
        (S.VALIDEE_CHARGE_AFFAIRE, {R.TECHNICIEN}, ANY, True, ANY),
    ],
    DemandeAction.ARCHIVER: [
        (S.VALIDEE_FINALE, {R.SUPERADMIN}, ANY, ANY, ANY),
    ],
}


def _matches(pattern, value):
    if pattern is ANY:
        return True
    if isinstance(pattern, set):
        return value in pattern
    return pattern == value


def expected(action, combination):
    return any(
        all(_matches(p, v) for p, v in zip(pattern, combination))
        for pattern in ALLOWED[action]
    )


def all_combinations():
    return itertools.product(DemandeStatus, Role, [True, False], [True, False], DemandeType)


def sortie(date, modifiable=True):
    return SortieSignature(user_id='5', date=date, signature='x', modifiable=modifiable)


with description('rules'):

    with context('is_allowed()'):

        with it('matches the permission table for every action and combination'):
            mismatches = []
            for action in DemandeAction:
                for combination in all_combinations():
                    if rules.is_allowed(action, *combination) != expected(action, combination):
                        mismatches.append((str(action),) + tuple(str(c) for c in combination))
            expect(mismatches).to(be_empty)

        with it('covers all nine actions'):
            expect(set(rules.RULES.keys())).to(equal(set(DemandeAction)))
            expect(len(rules.RULES)).to(equal(9))

        with it('refuses every action on a rejected demande'):
            for action in DemandeAction:
                for _, role, member, owner, demande_type in all_combinations():
                    expect(rules.is_allowed(action, S.REJETEE, role, member, owner, demande_type)).to(be_false)

        with it('refuses every action on an archived demande'):
            for action in DemandeAction:
                for _, role, member, owner, demande_type in all_combinations():
                    expect(rules.is_allowed(action, S.ARCHIVEE, role, member, owner, demande_type)).to(be_false)

        with it('refuses valider_outillage to conducteur_travaux on a materiel demande'):
            expect(rules.is_allowed(
                DemandeAction.VALIDER_OUTILLAGE, S.SOUMISE, R.CONDUCTEUR_TRAVAUX, True, False, T.MATERIEL
            )).to(be_false)

        with it('refuses rejeter to a role unrelated to the demande type'):
            expect(rules.is_allowed(
                DemandeAction.REJETER, S.SOUMISE, R.RESPONSABLE_APPRO, True, False, T.MATERIEL
            )).to(be_false)
            expect(rules.is_allowed(
                DemandeAction.REJETER, S.SOUMISE, R.CONDUCTEUR_TRAVAUX, True, False, T.OUTILLAGE
            )).to(be_false)

        with it('lets superadmin reject without project membership'):
            expect(rules.is_allowed(
                DemandeAction.REJETER, S.SOUMISE, R.SUPERADMIN, False, False, T.OUTILLAGE
            )).to(be_true)

        with it('returns False for an unknown action'):
            expect(rules.is_allowed('foo', S.SOUMISE, R.SUPERADMIN, True, True, T.MATERIEL)).to(be_false)

    with context('terminal statuses'):

        with it('are exactly the statuses no rule leaves'):
            leavable = set()
            for rule in rules.RULES.values():
                leavable |= rule.from_statuses
            terminal = {status for status in DemandeStatus if status.is_terminal()}
            expect(terminal).to(equal({S.REJETEE, S.ARCHIVEE}))
            expect(terminal & leavable).to(be_empty)

    with context('status order'):

        with it('only moves forward, rejetee being the only branch'):
            order = [
                S.BROUILLON, S.SOUMISE, S.VALIDEE_CONDUCTEUR, S.SORTIE_PREPAREE,
                S.VALIDEE_CHARGE_AFFAIRE, S.VALIDEE_FINALE, S.ARCHIVEE,
            ]
            rank = {status: index for index, status in enumerate(order)}
            rank[S.VALIDEE_QHSE] = rank[S.VALIDEE_CONDUCTEUR]
            for action, rule in rules.RULES.items():
                if rule.to_status is None or rule.to_status is S.REJETEE:
                    continue
                for from_status in rule.from_statuses:
                    expect(rank[rule.to_status]).to(be_above(rank[from_status]))
            expect(rules.RULES[DemandeAction.REJETER].from_statuses).to(equal(frozenset([S.SOUMISE])))

    with context('action_label()'):

        with it('returns the past participle of each action'):
            expect(rules.action_label(DemandeAction.SOUMETTRE)).to(equal('soumise'))
            expect(rules.action_label(DemandeAction.VALIDER_PREPARATION)).to(equal("validée par le chargé d'affaire"))
            expect(rules.action_label('archiver')).to(equal('archivée'))

        with it('falls back for unknown actions'):
            expect(rules.action_label('foo')).to(equal('mise à jour'))

    with context('can_modify_sortie()'):

        with before.each:
            self.prepared_at = datetime.datetime(2024, 5, 2, 10, 0, 0)

        with it('accepts a modification at exactly 45 minutes'):
            now = self.prepared_at + datetime.timedelta(minutes=45)
            expect(rules.can_modify_sortie(sortie(self.prepared_at), now)).to(be_true)

        with it('refuses a modification at 45.01 minutes'):
            now = self.prepared_at + datetime.timedelta(minutes=45.01)
            expect(rules.can_modify_sortie(sortie(self.prepared_at), now)).to(be_false)

        with it('refuses a frozen exit record even within the window'):
            now = self.prepared_at + datetime.timedelta(minutes=1)
            expect(rules.can_modify_sortie(sortie(self.prepared_at, modifiable=False), now)).to(be_false)

        with it('refuses when there is no exit record'):
            expect(rules.can_modify_sortie(None, self.prepared_at)).to(be_false)

        with it('honours a configured window'):
            now = self.prepared_at + datetime.timedelta(minutes=20)
            expect(rules.can_modify_sortie(sortie(self.prepared_at), now, window_minutes=15)).to(be_false)

    with context('sortie_deadline()'):

        with it('is 45 minutes after the preparation by default'):
            prepared_at = datetime.datetime(2024, 5, 2, 10, 0, 0)
            expect(rules.sortie_deadline(prepared_at)).to(equal(datetime.datetime(2024, 5, 2, 10, 45, 0)))
