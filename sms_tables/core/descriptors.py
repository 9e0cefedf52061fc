"""Column, action and bulk action descriptors."""

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

# Icons inferred from action labels when no icon is given
_DEFAULT_ACTION_ICONS = (
    ("view", ":material/visibility:"),
    ("edit", ":material/edit:"),
    ("delete", ":material/delete:"),
)


@dataclass
class Column:
    """How to read, label, sort, filter and render one field.

    Attributes:
        key: Dot path of the field in each row (unique per table)
        label: Header text, defaults to key
        sortable: Whether clicking the header sorts by this column
        filterable: Whether a per-column filter input is offered
        render: Optional (value, row) -> displayable
        subtext: Optional dot path or (row) -> displayable, shown under the cell
    """

    key: str
    label: Optional[str] = None
    sortable: bool = True
    filterable: bool = True
    render: Optional[Callable[[Any, Any], Any]] = None
    subtext: Optional[Union[str, Callable[[Any], Any]]] = None

    @property
    def title(self) -> str:
        return self.label or self.key


@dataclass
class Action:
    """A per-row action button.

    `disabled` and `hidden` may be booleans or predicates of the row.
    """

    label: str
    on_click: Callable[[Any], Any]
    color: Optional[str] = None
    hover_color: Optional[str] = None
    disabled: Union[bool, Callable[[Any], bool]] = False
    hidden: Union[bool, Callable[[Any], bool]] = False
    icon: Optional[str] = None

    def is_hidden(self, row: Any) -> bool:
        return bool(self.hidden(row)) if callable(self.hidden) else bool(self.hidden)

    def is_disabled(self, row: Any) -> bool:
        return (
            bool(self.disabled(row)) if callable(self.disabled) else bool(self.disabled)
        )

    def resolved_icon(self) -> Optional[str]:
        if self.icon:
            return self.icon
        label = (self.label or "").lower()
        for word, icon in _DEFAULT_ACTION_ICONS:
            if word in label:
                return icon
        return None


@dataclass
class BulkAction:
    """An action applied to the list of selected row identifiers."""

    label: str
    on_click: Callable[[List[Any]], Any]
    class_name: Optional[str] = None


@dataclass
class StaticActions:
    """The same action list for every row."""

    actions: List[Action] = field(default_factory=list)

    def resolve(self, row: Any) -> List[Action]:
        return list(self.actions)

    def __bool__(self) -> bool:
        return bool(self.actions)


@dataclass
class PerRowActions:
    """Actions computed from the row at render time."""

    factory: Callable[[Any], Sequence[Any]]

    def resolve(self, row: Any) -> List[Action]:
        return [as_action(action) for action in (self.factory(row) or [])]

    def __bool__(self) -> bool:
        return True


ActionSource = Union[StaticActions, PerRowActions]


def _from_mapping(cls, spec: Mapping[str, Any]):
    """Build a descriptor dataclass from a dict, rejecting unknown fields."""
    allowed = {f.name for f in fields(cls)}
    unknown = set(spec) - allowed
    if unknown:
        raise ValueError(
            f"Unknown {cls.__name__} field(s) {sorted(unknown)}. "
            f"Allowed fields: {sorted(allowed)}"
        )
    return cls(**spec)


def as_column(spec: Union[Column, Mapping[str, Any]]) -> Column:
    """Accept a Column or a column definition dict."""
    if isinstance(spec, Column):
        return spec
    return _from_mapping(Column, spec)


def as_action(spec: Union[Action, Mapping[str, Any]]) -> Action:
    """Accept an Action or an action definition dict."""
    if isinstance(spec, Action):
        return spec
    return _from_mapping(Action, spec)


def as_bulk_action(spec: Union[BulkAction, Mapping[str, Any]]) -> BulkAction:
    """Accept a BulkAction or a bulk action definition dict."""
    if isinstance(spec, BulkAction):
        return spec
    return _from_mapping(BulkAction, spec)


def as_action_source(actions: Any) -> ActionSource:
    """
    Wrap the caller's actions into an ActionSource.

    A list (or None) becomes StaticActions; a callable becomes PerRowActions.
    """
    if isinstance(actions, (StaticActions, PerRowActions)):
        return actions
    if actions is None:
        return StaticActions([])
    if callable(actions):
        return PerRowActions(actions)
    return StaticActions([as_action(action) for action in actions])


def build_columns(specs: Sequence[Union[Column, Dict[str, Any]]]) -> List[Column]:
    """
    Convert column specs and check that keys are unique.

    Raises:
        ValueError: If two columns share a key
    """
    columns = [as_column(spec) for spec in specs or []]
    seen = set()
    for column in columns:
        if column.key in seen:
            raise ValueError(
                f"Duplicate column key '{column.key}'. "
                f"Column keys: {[c.key for c in columns]}"
            )
        seen.add(column.key)
    return columns
