from confreg.models.user import User
from confreg.models.event_config import EventConfig
from confreg.models.event_team import EventTeam
from confreg.models.event_role import EventRole
from confreg.models.registration import Registration
from confreg.models.registrant import Registrant
from confreg.models.receipt import Receipt
from confreg.models.ticket import Ticket
from confreg.models.cancel_request import CancelRequest
from confreg.models.expense_request import ExpenseRequest
from confreg.models.donation import Donation
from confreg.models.income_source import IncomeSource
from confreg.models.event_log import EventLog

__all__ = [
    'User', 'EventConfig', 'EventTeam', 'EventRole', 'Registration',
    'Registrant', 'Receipt', 'Ticket', 'CancelRequest', 'ExpenseRequest',
    'Donation', 'IncomeSource', 'EventLog'
]
