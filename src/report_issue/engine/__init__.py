from report_issue.engine.renderer import UIRenderer, option_id, parse_option_id
from report_issue.engine.resolver import DependencyResolver
from report_issue.engine.router import EventRouter
from report_issue.engine.session import FormMode, FormSession, IdentificationContext
from report_issue.engine.submission import Notifier, SubmissionAssembler, SubmissionPayload, SubmissionResult

__all__ = [
    "DependencyResolver",
    "EventRouter",
    "FormMode",
    "FormSession",
    "IdentificationContext",
    "Notifier",
    "SubmissionAssembler",
    "SubmissionPayload",
    "SubmissionResult",
    "UIRenderer",
    "option_id",
    "parse_option_id",
]
