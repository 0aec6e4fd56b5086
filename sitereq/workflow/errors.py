class WorkflowError(Exception):
    """
    Business rule violation, carries the http status and the message shown to the caller
    """
    status = 500
    default_message = 'Erreur serveur'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(WorkflowError):
    status = 401
    default_message = 'Non authentifié'


class Forbidden(WorkflowError):
    status = 403
    default_message = 'Action non autorisée'


class NotFound(WorkflowError):
    status = 404
    default_message = 'Ressource non trouvée'


class BadRequest(WorkflowError):
    status = 400
    default_message = 'Données invalides'
