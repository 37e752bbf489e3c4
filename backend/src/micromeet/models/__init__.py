"""SQLAlchemy models for Micromeet Invoices"""

from .base import Base, PortableJSONB, TZDateTime, utcnow
from .org import Org
from .user import User
from .member import OrganizationMember
from .invitation import Invitation
from .password_reset import PasswordResetToken
from .audit_log import AuditLog
from .customer import Customer
from .document_counter import DocumentCounter
from .invoice import Invoice, INVOICE_STATUSES
from .purchase_order import PurchaseOrder, PURCHASE_ORDER_STATUSES
from .receipt import Receipt, PAYMENT_METHODS
from .company_settings import CompanySettings
from .bank_account import BankAccount
from .terms_template import TermsTemplate
from .email_settings import EmailSettings
from .email_log import EmailLog

__all__ = [
    "Base",
    "PortableJSONB",
    "TZDateTime",
    "utcnow",
    "Org",
    "User",
    "OrganizationMember",
    "Invitation",
    "PasswordResetToken",
    "AuditLog",
    "Customer",
    "DocumentCounter",
    "Invoice",
    "INVOICE_STATUSES",
    "PurchaseOrder",
    "PURCHASE_ORDER_STATUSES",
    "Receipt",
    "PAYMENT_METHODS",
    "CompanySettings",
    "BankAccount",
    "TermsTemplate",
    "EmailSettings",
    "EmailLog",
]
