from report_issue.api.main import create_app

__all__ = ["create_app"]
