from confreg.schemas.event_schema import (
    event_config_schema, event_configs_schema, event_role_schema, event_roles_schema)
from confreg.schemas.user_schema import (
    user_schema, users_schema, user_login_schema, user_register_schema,
    profile_update_schema)
from confreg.schemas.registration_schema import (
    registration_input_schema, admin_registration_input_schema,
    registration_filter_schema, portrait_schema)
from confreg.schemas.payment_schema import (
    payment_report_schema, payment_review_schema, payment_decision_schema,
    payment_reject_schema)
from confreg.schemas.cancel_request_schema import (
    cancel_request_input_schema, cancel_request_process_schema)
from confreg.schemas.check_in_schema import check_in_schema
from confreg.schemas.team_schema import (
    team_create_schema, bulk_assign_schema, assign_team_schema)
from confreg.schemas.finance_schema import (
    expense_create_schema, expense_update_schema, donation_create_schema,
    donation_update_schema, income_source_create_schema,
    income_source_update_schema, finance_filter_schema)

__all__ = [
    'event_config_schema', 'event_configs_schema',
    'event_role_schema', 'event_roles_schema',
    'user_schema', 'users_schema', 'user_login_schema', 'user_register_schema',
    'profile_update_schema',
    'registration_input_schema', 'admin_registration_input_schema',
    'registration_filter_schema', 'portrait_schema',
    'payment_report_schema', 'payment_review_schema', 'payment_decision_schema',
    'payment_reject_schema',
    'cancel_request_input_schema', 'cancel_request_process_schema',
    'check_in_schema',
    'team_create_schema', 'bulk_assign_schema', 'assign_team_schema',
    'expense_create_schema', 'expense_update_schema', 'donation_create_schema',
    'donation_update_schema', 'income_source_create_schema',
    'income_source_update_schema', 'finance_filter_schema'
]
