import datetime
import os
os.environ.setdefault('ENV', 'test')

from mamba import description, context, it
from expects import *

import sitereq.modeltr as data
from sitereq.modeltr.enums import Role
from sitereq.workflow import BadRequest, Forbidden
from sitereq.workflow import users

NOW = datetime.datetime(2024, 5, 2, 9, 0, 0)


def build_store():
    store = data.MemoryStore()
    store.insert(data.User(id='1', nom='Admin', email='admin@example.com', role=Role.SUPERADMIN))
    store.insert(data.User(id='2', nom='Dupont', email='jean.dupont@example.com', role=Role.TECHNICIEN, projets=['P']))
    store.insert(data.Projet(id='P', nom='Alpha', utilisateurs=['2']))
    store.insert(data.Projet(id='Q', nom='Beta', utilisateurs=[]))
    return store


def payload(**kwargs):
    values = {
        'nom': 'Moreau',
        'prenom': 'Sophie',
        'email': 'sophie.moreau@example.com',
        'role': 'charge_affaire',
        'projets': ['P', 'Q'],
    }
    values.update(kwargs)
    return values


with description('users'):

    with before.each:
        self.store = build_store()
        self.superadmin = self.store.get_by_id(data.User, '1')
        self.technicien = self.store.get_by_id(data.User, '2')

    with context('list_users()'):

        with it('lists the whole directory for superadmin'):
            expect([u.id for u in users.list_users(self.store, self.superadmin)]).to(equal(['1', '2']))

        with it('is refused to other roles'):
            expect(lambda: users.list_users(self.store, self.technicien)).to(
                raise_error(Forbidden, 'Permissions insuffisantes')
            )

    with context('check_payload_user()'):

        with it('trims names and drops duplicated projects'):
            values = users.check_payload_user(payload(nom=' Moreau ', projets=['P', 'P']))
            expect(values['nom']).to(equal('Moreau'))
            expect(values['role']).to(be(Role.CHARGE_AFFAIRE))
            expect(values['projets']).to(equal(['P']))

        with it('accepts a user without project'):
            expect(users.check_payload_user(payload(projets=None))['projets']).to(equal([]))

        with it('requires nom, prenom and email'):
            for key in ('nom', 'prenom', 'email'):
                expect(lambda: users.check_payload_user(payload(**{key: ' '}))).to(
                    raise_error(BadRequest, 'Données invalides')
                )

        with it('refuses an email without @'):
            expect(lambda: users.check_payload_user(payload(email='sophie'))).to(
                raise_error(BadRequest, 'Email invalide')
            )

        with it('refuses an unknown role'):
            expect(lambda: users.check_payload_user(payload(role='stagiaire'))).to(
                raise_error(BadRequest, 'Rôle invalide')
            )

        with it('refuses projects that are not a list of ids'):
            expect(lambda: users.check_payload_user(payload(projets='P'))).to(raise_error(BadRequest))
            expect(lambda: users.check_payload_user(payload(projets=[1]))).to(raise_error(BadRequest))

    with context('create_user()'):

        with it('creates the user and adds it to its projects'):
            user = users.create_user(self.store, self.superadmin, payload(), NOW)
            expect(user.has_id()).to(be_true)
            stored = self.store.get_by_id(data.User, user.id)
            expect(stored.role).to(be(Role.CHARGE_AFFAIRE))
            expect(stored.projets).to(equal(['P', 'Q']))
            expect(self.store.get_by_id(data.Projet, 'P').utilisateurs).to(equal(['2', user.id]))
            expect(self.store.get_by_id(data.Projet, 'Q').utilisateurs).to(equal([user.id]))

        with it('is reserved to superadmin'):
            expect(lambda: users.create_user(self.store, self.technicien, payload(), NOW)).to(
                raise_error(Forbidden, 'Permissions insuffisantes')
            )
            expect(self.store.list(data.User)).to(have_len(2))

        with it('refuses an email already in use, whatever its case'):
            expect(lambda: users.create_user(
                self.store, self.superadmin, payload(email='Jean.Dupont@example.com'), NOW
            )).to(raise_error(BadRequest, 'Email déjà utilisé'))

        with it('refuses unknown projects and saves nothing'):
            expect(lambda: users.create_user(self.store, self.superadmin, payload(projets=['P', 'Z']), NOW)).to(
                raise_error(BadRequest, 'Projet inconnu: Z')
            )
            expect(self.store.list(data.User)).to(have_len(2))
            expect(self.store.get_by_id(data.Projet, 'P').utilisateurs).to(equal(['2']))
