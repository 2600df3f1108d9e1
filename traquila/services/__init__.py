"""Services for the Traquila journal."""

from traquila.services.dashboard import DashboardSession
from traquila.services.journal import JournalStore
from traquila.services.ledger import VolumeLedger

__all__ = ["DashboardSession", "JournalStore", "VolumeLedger"]
