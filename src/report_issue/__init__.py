"""
Library package for report-issue-service.

Drives the "Report Issue" feedback panel on a room device: form schema,
session state, rendering, event routing and webhook submission.

- Runtime package: `src/report_issue/`
- Vercel entrypoint: `api/index.py`
"""

__version__ = "1.0.0"
