"""SQLAlchemy models."""

from webx_crm.models.calendar_event import CalendarEvent
from webx_crm.models.client import Client
from webx_crm.models.oneoff_sale import OneOffSale
from webx_crm.models.project import Project
from webx_crm.models.recurring_sale import RecurringSale
from webx_crm.models.renewal import Renewal
from webx_crm.models.task import Task
from webx_crm.models.xero_export import XeroExport, XeroExportItem

__all__ = [
    "CalendarEvent",
    "Client",
    "OneOffSale",
    "Project",
    "RecurringSale",
    "Renewal",
    "Task",
    "XeroExport",
    "XeroExportItem",
]
