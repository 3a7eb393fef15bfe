"""Email notifications for registered loans."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from loan_origination.exceptions import NotificationError
from loan_origination.models import ClientRecord, Installment, LoanTerms
from loan_origination.schedule import quantize_money

logger = logging.getLogger(__name__)

REGISTRATION_SUBJECT = "Préstamo Registrado - Sistema de Préstamos"
SCHEDULE_SUBJECT = "Cronograma de Pagos - Sistema de Préstamos"


@dataclass
class Attachment:
    """Named text attachment."""

    name: str
    content: str


@dataclass
class EmailMessage:
    """Outgoing email."""

    to_address: str
    subject: str
    html_body: str
    attachments: list[Attachment] = field(default_factory=list)


class NotificationSender(Protocol):
    """Delivers email messages; raises NotificationError on failure."""

    def send(self, message: EmailMessage) -> None: ...


class LoggingEmailSender:
    """Simulated delivery that writes each message to the log."""

    def __init__(self, sender_address: str = "notificaciones@prestamos.com") -> None:
        self.sender_address = sender_address
        self.sent: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> None:
        """Log the message and keep it in ``sent``."""
        if not message.to_address:
            raise NotificationError("Missing recipient address")
        logger.info(
            "Email from %s to %s: %s (%d attachments)",
            self.sender_address,
            message.to_address,
            message.subject,
            len(message.attachments),
        )
        logger.debug("Email body:\n%s", message.html_body)
        self.sent.append(message)


def _format_money(value) -> str:
    return f"S/ {quantize_money(value):,.2f}"


def _format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def _recipient(client: ClientRecord, to_address: str | None) -> str:
    address = to_address or client.email
    if not address:
        raise NotificationError("El cliente no tiene correo electrónico registrado")
    return address


def _terms_summary(terms: LoanTerms) -> str:
    return (
        "<ul>\n"
        f"  <li><strong>Monto:</strong> {_format_money(terms.principal)}</li>\n"
        f"  <li><strong>Plazo:</strong> {terms.term_months} meses</li>\n"
        f"  <li><strong>Tasa de interés anual:</strong> {terms.annual_rate_percent}%</li>\n"
        f"  <li><strong>Fecha de emisión:</strong> {_format_date(terms.start_date)}</li>\n"
        "</ul>\n"
    )


def render_schedule_text(schedule: list[Installment]) -> str:
    """One line per installment, used as the plain-text attachment."""
    return "\n".join(
        f"Cuota {i.sequence_number} - Fecha: {_format_date(i.due_date)} - Monto: {_format_money(i.payment_amount)}"
        for i in schedule
    )


def render_registration_email(
    client: ClientRecord,
    terms: LoanTerms,
    schedule: list[Installment],
    to_address: str | None = None,
) -> EmailMessage:
    """Build the notice sent after a loan is registered.

    Raises
    ------
    NotificationError
        If neither ``to_address`` nor the client email is available.
    """
    recipient = _recipient(client, to_address)
    body = (
        f"<h2>Estimado(a) {client.display_name}</h2>\n"
        "<p>Le informamos que se ha registrado un préstamo a su nombre con los siguientes detalles:</p>\n"
        f"{_terms_summary(terms)}"
        "<p>Adjunto encontrará el cronograma de pagos correspondiente.</p>\n"
        "<p>Atentamente,<br>Sistema de Préstamos</p>\n"
    )
    return EmailMessage(
        to_address=recipient,
        subject=REGISTRATION_SUBJECT,
        html_body=body,
        attachments=[Attachment(name="cronograma_pagos.txt", content=render_schedule_text(schedule))],
    )


def render_schedule_email(
    client: ClientRecord,
    terms: LoanTerms,
    schedule: list[Installment],
    to_address: str | None = None,
) -> EmailMessage:
    """Build an email carrying the full schedule as an HTML table."""
    recipient = _recipient(client, to_address)
    rows = "".join(
        "  <tr>"
        f"<td>{i.sequence_number}</td>"
        f"<td>{_format_date(i.due_date)}</td>"
        f"<td>{_format_money(i.payment_amount)}</td>"
        f"<td>{_format_money(i.interest_portion)}</td>"
        f"<td>{_format_money(i.principal_portion)}</td>"
        f"<td>{_format_money(i.remaining_balance)}</td>"
        "</tr>\n"
        for i in schedule
    )
    body = (
        f"<h2>Estimado(a) {client.display_name}</h2>\n"
        "<p>Adjunto encontrará el cronograma de pagos de su préstamo:</p>\n"
        f"{_terms_summary(terms)}"
        '<table border="1" cellpadding="5" cellspacing="0">\n'
        "  <tr><th>Cuota</th><th>Fecha de Pago</th><th>Cuota Mensual</th>"
        "<th>Interés</th><th>Amortización</th><th>Saldo</th></tr>\n"
        f"{rows}"
        "</table>\n"
        "<p>Atentamente,<br>Sistema de Préstamos</p>\n"
    )
    return EmailMessage(to_address=recipient, subject=SCHEDULE_SUBJECT, html_body=body)
