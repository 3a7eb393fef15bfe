"""Enumeration types for loan-origination entities."""

from enum import Enum


class PersonType(str, Enum):
    NATURAL = "natural"
    LEGAL = "legal"


class LoanStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


class Resource(str, Enum):
    LOANS = "loans"
    USERS = "users"
    REPORTS = "reports"
    SETTINGS = "settings"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    MANAGE = "manage"
