"""Tests for email rendering and the logging sender."""

import logging
from dataclasses import replace

import pytest

from loan_origination.exceptions import NotificationError
from loan_origination.models import ClientRecord, LoanTerms, PersonType
from loan_origination.notifications import (
    EmailMessage,
    LoggingEmailSender,
    render_registration_email,
    render_schedule_email,
    render_schedule_text,
)
from loan_origination.schedule import compute_schedule


class TestRenderRegistrationEmail:
    """Tests for the registration notice."""

    def test_addressed_to_client(self, sample_client: ClientRecord, sample_terms: LoanTerms) -> None:
        message = render_registration_email(sample_client, sample_terms, compute_schedule(sample_terms))

        assert message.to_address == "juan.perez@ejemplo.com"
        assert message.subject == "Préstamo Registrado - Sistema de Préstamos"
        assert "Estimado(a) Juan Carlos Pérez García" in message.html_body
        assert "S/ 1,000.00" in message.html_body
        assert "12 meses" in message.html_body
        assert "15/01/2024" in message.html_body

    def test_schedule_attachment(self, sample_client: ClientRecord, sample_terms: LoanTerms) -> None:
        message = render_registration_email(sample_client, sample_terms, compute_schedule(sample_terms))

        assert len(message.attachments) == 1
        attachment = message.attachments[0]
        assert attachment.name == "cronograma_pagos.txt"
        lines = attachment.content.splitlines()
        assert len(lines) == 12
        assert lines[0].startswith("Cuota 1 - Fecha: 15/02/2024 - Monto: S/ ")

    def test_override_recipient(self, sample_client: ClientRecord, sample_terms: LoanTerms) -> None:
        message = render_registration_email(
            sample_client, sample_terms, [], to_address="cliente@ejemplo.com"
        )
        assert message.to_address == "cliente@ejemplo.com"

    def test_company_uses_business_name(self, sample_terms: LoanTerms) -> None:
        company = ClientRecord(
            person_type=PersonType.LEGAL,
            document_type="RUC",
            document_number="20123456789",
            business_name="Inversiones ABC S.A.C.",
            email="contacto@inversionesabc.com",
        )
        message = render_registration_email(company, sample_terms, [])
        assert "Estimado(a) Inversiones ABC S.A.C." in message.html_body

    def test_client_without_email(self, sample_client: ClientRecord, sample_terms: LoanTerms) -> None:
        with pytest.raises(NotificationError, match="correo"):
            render_registration_email(replace(sample_client, email=None), sample_terms, [])


class TestRenderScheduleEmail:
    def test_one_row_per_installment(self, sample_client: ClientRecord, sample_terms: LoanTerms) -> None:
        schedule = compute_schedule(sample_terms)
        message = render_schedule_email(sample_client, sample_terms, schedule)

        assert message.subject == "Cronograma de Pagos - Sistema de Préstamos"
        assert message.html_body.count("<tr><td>") == 12
        assert "<td>S/ 0.00</td></tr>" in message.html_body
        assert message.attachments == []

    def test_schedule_text_empty(self) -> None:
        assert render_schedule_text([]) == ""


class TestLoggingEmailSender:
    def test_send_records_and_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        sender = LoggingEmailSender("noreply@prestamos.com")
        message = EmailMessage(to_address="a@b.com", subject="Hola", html_body="<p>x</p>")

        with caplog.at_level(logging.INFO, logger="loan_origination.notifications.email"):
            sender.send(message)

        assert sender.sent == [message]
        assert "a@b.com" in caplog.text

    def test_missing_recipient(self) -> None:
        with pytest.raises(NotificationError):
            LoggingEmailSender().send(EmailMessage(to_address="", subject="s", html_body=""))
