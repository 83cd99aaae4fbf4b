from report_issue.adapters.base import DisplaySurface, StatusProvider, Transport
from report_issue.adapters.display import XapiDisplay
from report_issue.adapters.status import XapiStatus
from report_issue.adapters.webhook import WebhookTransport
from report_issue.adapters.xapi import XapiClient

__all__ = [
    "DisplaySurface",
    "StatusProvider",
    "Transport",
    "WebhookTransport",
    "XapiClient",
    "XapiDisplay",
    "XapiStatus",
]
