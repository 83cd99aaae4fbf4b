from __future__ import annotations

import logging
from typing import Iterator

from report_issue.engine.session import FormSession
from report_issue.schemas.form import FieldSpec

logger = logging.getLogger(__name__)


class DependencyResolver:
    """
    Decides which fields may render for the current session.

    A field is eligible when it is visible, declares at least one widget variant,
    and every key in `requires` already has a value. Read-only over the session.
    """

    def __init__(self, session: FormSession) -> None:
        self.session = session

    def is_eligible(self, key: str) -> bool:
        spec = self.session.schema.get(key)
        if spec is None:
            return False
        return self._eligible(spec)

    def eligible_fields(self) -> Iterator[FieldSpec]:
        """Eligible fields in schema declaration order."""
        for spec in self.session.schema.form_fields:
            if self._eligible(spec):
                yield spec

    def _eligible(self, spec: FieldSpec) -> bool:
        if not spec.visible or not spec.variants:
            return False
        missing = [r for r in spec.requires if not self.session.has(r)]
        if missing:
            logger.debug("Field [%s] waiting on %s", spec.key, missing)
            return False
        return True
