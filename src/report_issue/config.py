"""
Service configuration.

Settings come from `REPORT_ISSUE_*` environment variables; `.env` and
`.env.local` are loaded first when present (real environment wins). The form
schema comes from the JSON file at `REPORT_ISSUE_FORM_PATH`, or the built-in
default form.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from report_issue.defaults import DEFAULT_FORM
from report_issue.errors import FormSchemaError
from report_issue.schemas.form import FormSchema
from report_issue.utils import env_bool, env_str

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    name: str = Field(default="Report Issue", description="Panel/page name and text-input title")
    panel_id: str = Field(default="feedback", description="Panel id this form owns")
    service_url: str = Field(default="", description="Webhook that receives submissions")
    allow_insecure_https: bool = Field(default=False, description="Skip certificate checks on the webhook POST")
    show_alert: bool = Field(default=True, description="Show sending/success/error notices on the device")
    waiting_text: str = Field(default="Sending Feedback")
    form_path: Optional[str] = Field(default=None, description="JSON form schema; built-in form when unset")

    device_host: str = Field(default="", description="Device address for xAPI (host or https://host)")
    device_username: str = ""
    device_password: str = ""
    device_verify_tls: bool = True

    log_level: str = "INFO"


def load_settings(env_dir: Optional[Path] = None) -> Settings:
    # Load `.env` + `.env.local` when present (local dev convenience).
    base = env_dir or Path.cwd()
    load_dotenv(base / ".env", override=False)
    load_dotenv(base / ".env.local", override=False)

    return Settings(
        name=env_str("REPORT_ISSUE_NAME", "Report Issue"),
        panel_id=env_str("REPORT_ISSUE_PANEL_ID", "feedback"),
        service_url=env_str("REPORT_ISSUE_SERVICE_URL"),
        allow_insecure_https=env_bool("REPORT_ISSUE_ALLOW_INSECURE_HTTPS", default=False),
        show_alert=env_bool("REPORT_ISSUE_SHOW_ALERT", default=True),
        waiting_text=env_str("REPORT_ISSUE_WAITING_TEXT", "Sending Feedback"),
        form_path=env_str("REPORT_ISSUE_FORM_PATH") or None,
        device_host=env_str("REPORT_ISSUE_DEVICE_HOST"),
        device_username=env_str("REPORT_ISSUE_DEVICE_USERNAME"),
        device_password=env_str("REPORT_ISSUE_DEVICE_PASSWORD"),
        device_verify_tls=env_bool("REPORT_ISSUE_DEVICE_VERIFY_TLS", default=True),
        log_level=env_str("REPORT_ISSUE_LOG_LEVEL", "INFO").upper(),
    )


def load_form_schema(path: Optional[str] = None) -> FormSchema:
    """Load and validate the form schema. Raises FormSchemaError on any problem."""
    if not path:
        return FormSchema.from_config(DEFAULT_FORM)
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise FormSchemaError(f"Could not read form schema {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise FormSchemaError(f"Form schema {p} must be a JSON object")
    schema = FormSchema.from_config(data)
    logger.info("Loaded form schema from %s (%d fields)", p, len(schema.form_fields))
    return schema


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
