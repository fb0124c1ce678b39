from flask import current_app

from confreg import db
from confreg.models.registrant import Registrant
from confreg.models.registration import Registration
from confreg.models.ticket import Ticket
from confreg.services.errors import NotFoundError, PermissionDeniedError, ServiceError
from confreg.services.registration_lifecycle import can_access_tickets
from confreg.utils.token_utils import generate_ticket_token

PORTRAIT_ADMIN_ROLES = ('super_admin', 'regional_admin', 'registration_manager')


def issue_tickets(registration):
    """Add a ticket for every registrant that lacks one. Does not commit."""
    db.session.flush()
    issued = []
    for registrant in registration.registrants:
        if registrant.tickets:
            continue
        ticket = Ticket(registrant_id=registrant.id,
                        qr_code=generate_ticket_token(registrant.id))
        registrant.tickets.append(ticket)
        issued.append(ticket)
    return issued


def get_tickets_for_invoice(user, invoice_code):
    """Owner-only ticket view of a registration."""
    registration = Registration.query.filter_by(
        invoice_code=invoice_code, user_id=user.id).first()
    if not registration:
        raise NotFoundError('Registration not found')

    if not can_access_tickets(registration.status):
        raise ServiceError('Tickets are only available for confirmed registrations')

    tickets = []
    for registrant in registration.registrants:
        data = registrant.to_dict()
        data['ticket'] = registrant.tickets[0].to_dict() if registrant.tickets else None
        data['event_role'] = registrant.event_role.to_dict() if registrant.event_role else None
        tickets.append(data)

    return {
        'registration': registration.to_dict(),
        'registrants': tickets,
    }


def update_portrait(user, registrant_id, portrait_url):
    registrant = db.session.get(Registrant, registrant_id)
    if not registrant:
        raise NotFoundError('Registrant not found')

    owner_id = registrant.registration.user_id
    if owner_id != user.id and user.role not in PORTRAIT_ADMIN_ROLES:
        raise PermissionDeniedError('Forbidden')

    registrant.portrait_url = portrait_url
    db.session.commit()
    current_app.logger.info(f"Portrait updated for registrant {registrant_id}")
    return registrant
