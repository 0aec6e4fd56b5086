from .enums import DemandeStatus, DemandeType, Role, DemandeAction
from .document import Document, DocumentList
from .signature import ValidationSignature, SortieSignature
from .demande import Demande
from .user import User
from .projet import Projet
from .notification import Notification
from .history_entry import HistoryEntry
from .connection import Connection, StoreConnectionError
from .store import DocumentStore, MemoryStore, PgStore, build_store
from .directory import load_directory, to_datetime
