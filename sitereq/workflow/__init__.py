from .errors import WorkflowError, Unauthenticated, Forbidden, NotFound, BadRequest
from .rules import RULES, ACTION_LABELS, is_allowed, can_modify_sortie, action_label
from .dispatcher import ActionDispatcher, ActionResult, resolve_actor
