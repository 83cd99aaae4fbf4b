"""
Form schema models.

The on-disk shape mirrors the device macro config:

    {
      "start": {"options": ["Technical Issue ...", ...]},
      "form": {
        "category": {"type": {"Text": {...}, "Button": {...}}, "action": "Options", ...},
        "name": {"requires": ["category"], ...},
        "submit": {"requires": ["category"], "action": "Submit", "value": "active", ...}
      }
    }

Field and widget-variant declaration order is preserved; it drives row order and
widget order within a row.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from report_issue.errors import FormSchemaError


# Submission payload keys filled from device context, not from form fields.
RESERVED_KEYS = frozenset({"identification", "bookingId", "callDetails", "conferenceDetails"})


class FieldAction(str, Enum):
    OPTIONS = "Options"
    TEXT_INPUT = "TextInput"
    SUBMIT = "Submit"


class TextVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["Text"] = "Text"
    prefix: str = ""
    options: str = "size=2;fontSize=normal;align=left"


class ButtonVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["Button"] = "Button"
    # [label before a value exists, label once it does]; one label serves both.
    name: Tuple[str, ...] = Field(..., min_length=1, max_length=2)
    options: str = "size=2"


WidgetVariant = Annotated[Union[TextVariant, ButtonVariant], Field(discriminator="kind")]


class FieldSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    key: str
    requires: Tuple[str, ...] = ()
    variants: Tuple[WidgetVariant, ...] = Field(default=(), alias="type")
    action: Optional[FieldAction] = None
    placeholder: str = ""
    prompt_text: str = Field(default="", alias="promptText")
    input_type: str = Field(default="SingleLine", alias="inputType")
    show_placeholder: bool = Field(default=False, alias="showPlaceholder")
    # The macro config spells it `visiable`; accept both.
    visible: bool = Field(default=True, validation_alias=AliasChoices("visible", "visiable"))
    modifiable: bool = True
    value: Optional[str] = Field(default=None, description="Activation value pushed to the widget once rendered")
    regex: Optional[str] = Field(default=None, description="Validation hook pattern (not enforced)")

    @model_validator(mode="before")
    @classmethod
    def _variants_from_mapping(cls, data: Any) -> Any:
        """Accept `type: {"Text": {...}, "Button": {...}}` keeping declaration order."""
        if not isinstance(data, dict):
            return data
        raw = data.get("type")
        if not isinstance(raw, dict):
            return data
        out = dict(data)
        out["type"] = [{**(spec or {}), "kind": kind} for kind, spec in raw.items()]
        return out

    @property
    def button(self) -> Optional[ButtonVariant]:
        for variant in self.variants:
            if isinstance(variant, ButtonVariant):
                return variant
        return None

    @property
    def text_id(self) -> str:
        return f"{self.key}-text"


def label_for(field: FieldSpec, has_value: bool) -> str:
    """Button label for a field: the post-value label once a value exists."""
    button = field.button
    if button is None:
        return ""
    if has_value and len(button.name) > 1:
        return button.name[1]
    return button.name[0]


class StartScreen(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = "Please select a category below:"
    prompt_options: str = "size=3;fontSize=normal;align=left"
    option_options: str = "size=4"
    options: Tuple[str, ...] = Field(..., min_length=1)


class PanelAppearance(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    location: str = "HomeScreenAndCallControls"
    type: str = "Statusbar"
    icon: str = "Helpdesk"
    color: str = "#0067ac"
    activity_type: str = Field(default="Custom", alias="activityType")


class FormSchema(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: StartScreen
    form_fields: Tuple[FieldSpec, ...] = Field(..., alias="form")
    panel: PanelAppearance = Field(default_factory=PanelAppearance)
    category_field: str = Field(default="category", alias="categoryField")

    @model_validator(mode="before")
    @classmethod
    def _fields_from_mapping(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data.get("form")
        if not isinstance(raw, dict):
            return data
        out = dict(data)
        out["form"] = [{**(spec or {}), "key": key} for key, spec in raw.items()]
        return out

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> "FormSchema":
        try:
            schema = cls.model_validate(data)
        except ValidationError as exc:
            raise FormSchemaError(f"Invalid form schema: {exc}") from exc
        schema.check_graph()
        return schema

    def get(self, key: str) -> Optional[FieldSpec]:
        for field in self.form_fields:
            if field.key == key:
                return field
        return None

    def keys(self) -> List[str]:
        return [f.key for f in self.form_fields]

    def check_graph(self) -> None:
        """
        Validate the dependency graph.

        Raises FormSchemaError on duplicate or reserved keys, unknown `requires`
        references, cycles, or a Button without an action.
        """
        keys: List[str] = [f.key for f in self.form_fields]
        if len(set(keys)) != len(keys):
            raise FormSchemaError(f"Duplicate field keys: {keys}")
        reserved = sorted(RESERVED_KEYS.intersection(keys))
        if reserved:
            raise FormSchemaError(f"Field keys collide with submission context: {reserved}")
        known = set(keys)

        for field in self.form_fields:
            unknown = [r for r in field.requires if r not in known]
            if unknown:
                raise FormSchemaError(f"Field '{field.key}' requires unknown fields: {unknown}")
            if field.button is not None and field.action is None:
                raise FormSchemaError(f"Field '{field.key}' has a Button but no action")

        graph = {f.key: f.requires for f in self.form_fields}
        done: set[str] = set()
        for key in keys:
            self._walk(key, graph, path=[], done=done)

    @staticmethod
    def _walk(key: str, graph: Dict[str, Tuple[str, ...]], *, path: List[str], done: set[str]) -> None:
        if key in done:
            return
        if key in path:
            cycle = path[path.index(key):] + [key]
            raise FormSchemaError(f"Dependency cycle: {' -> '.join(cycle)}")
        path.append(key)
        for dep in graph.get(key, ()):
            FormSchema._walk(dep, graph, path=path, done=done)
        path.pop()
        done.add(key)
