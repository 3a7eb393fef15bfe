#!/usr/bin/env python3
"""Register a loan from the command line and print its payment schedule.

Uses the store configured through the environment (``LOAN_STORE_BACKEND``,
``LOAN_STORE_PATH``); the in-memory default forgets everything on exit.

Example::

    LOAN_STORE_BACKEND=json python scripts/register_loan.py \\
        --username agent --password agent123 \\
        --person-type natural --document 12345678 --amount 1000 --term 12
"""

import argparse
import logging
import sys

from loan_origination.auth import UserService
from loan_origination.config import LoanOriginationConfig
from loan_origination.exceptions import LoanOriginationError
from loan_origination.logging import setup_logging
from loan_origination.notifications import LoggingEmailSender
from loan_origination.registry import SimulatedRegistry
from loan_origination.schedule import quantize_money
from loan_origination.store import LoanOriginationRepository, build_store
from loan_origination.workflow import LoanRegistrationWorkflow

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a loan and print its schedule")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--person-type", choices=["natural", "legal"], default="natural")
    parser.add_argument("--document", required=True, help="DNI (8 digits) or RUC (11 digits)")
    parser.add_argument("--amount", required=True, help="Principal amount")
    parser.add_argument("--term", required=True, help="Term in months (1-60)")
    return parser.parse_args()


def print_schedule(result) -> None:
    loan = result.loan
    print(f"\n{'='*72}")
    print(f"Loan {loan.id} - {loan.client.display_name} ({loan.client.document_number})")
    print(f"Principal: {quantize_money(loan.terms.principal)}  Term: {loan.terms.term_months} months")
    print("=" * 72)
    print(f"{'#':>3}  {'Due date':<10}  {'Payment':>12}  {'Interest':>12}  {'Principal':>12}  {'Balance':>12}")
    for i in loan.schedule:
        print(
            f"{i.sequence_number:>3}  {i.due_date.isoformat():<10}  "
            f"{quantize_money(i.payment_amount):>12}  {quantize_money(i.interest_portion):>12}  "
            f"{quantize_money(i.principal_portion):>12}  {quantize_money(i.remaining_balance):>12}"
        )
    print(f"\nRemaining daily limit: {quantize_money(result.remaining_daily_limit)}")
    if result.warning:
        print(f"Warning: {result.warning}")


def main() -> int:
    args = parse_args()
    config = LoanOriginationConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    repository = LoanOriginationRepository(build_store(config.store))
    users = UserService(repository)
    workflow = LoanRegistrationWorkflow(
        repository,
        SimulatedRegistry(
            seed=config.registry.seed,
            locale=config.registry.locale,
            generate_unknown=config.registry.generate_unknown,
        ),
        LoggingEmailSender(config.notifications.sender_address),
        config,
    )

    try:
        session = users.login(args.username, args.password)
        result = workflow.register_loan(
            session,
            args.person_type,
            args.document,
            args.amount,
            args.term,
        )
    except LoanOriginationError as e:
        logger.error("Registration failed: %s", e)
        return 1

    print_schedule(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
