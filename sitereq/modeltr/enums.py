import enum


class EnumBase(enum.Enum):
    def __str__(self):
        return self.value


class StrEnumBase(EnumBase):
    pass


class DemandeStatus(StrEnumBase):
    BROUILLON = 'brouillon'
    SOUMISE = 'soumise'
    VALIDEE_CONDUCTEUR = 'validee_conducteur'
    VALIDEE_QHSE = 'validee_qhse'
    REJETEE = 'rejetee'
    SORTIE_PREPAREE = 'sortie_preparee'
    VALIDEE_CHARGE_AFFAIRE = 'validee_charge_affaire'
    VALIDEE_FINALE = 'validee_finale'
    ARCHIVEE = 'archivee'

    def is_terminal(self) -> bool:
        return self in [DemandeStatus.REJETEE, DemandeStatus.ARCHIVEE]


class DemandeType(StrEnumBase):
    MATERIEL = 'materiel'
    OUTILLAGE = 'outillage'


class Role(StrEnumBase):
    SUPERADMIN = 'superadmin'
    TECHNICIEN = 'technicien'
    CONDUCTEUR_TRAVAUX = 'conducteur_travaux'
    RESPONSABLE_QHSE = 'responsable_qhse'
    RESPONSABLE_APPRO = 'responsable_appro'
    CHARGE_AFFAIRE = 'charge_affaire'

    def is_superadmin(self) -> bool:
        return self is Role.SUPERADMIN


class DemandeAction(StrEnumBase):
    SOUMETTRE = 'soumettre'
    VALIDER_MATERIEL = 'valider_materiel'
    VALIDER_OUTILLAGE = 'valider_outillage'
    REJETER = 'rejeter'
    PREPARER_SORTIE = 'preparer_sortie'
    MODIFIER_SORTIE = 'modifier_sortie'
    VALIDER_PREPARATION = 'valider_preparation'
    VALIDATION_FINALE = 'validation_finale'
    ARCHIVER = 'archiver'

    @classmethod
    def parse(cls, value):
        """
        Returns the action for a raw name, None when the name is not known
        :return: DemandeAction or None
        """
        try:
            return cls(value)
        except ValueError:
            return None
