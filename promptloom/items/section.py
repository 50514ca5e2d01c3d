"""
Section tree.

A Section is an ordered, titled container of Weighted items and nested
Sections. Sections are mutable while a prompt is being assembled; every
mutator returns the Section itself so calls can be chained.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, Optional, TypeVar, Union

from ..constants import DEFAULT_ITEM_WEIGHT, DEFAULT_WEIGHT
from .parameters import Parameters, merge, validate_parameters
from .weighted import Weighted, create_weighted


T = TypeVar("T", bound=Weighted)


class NotASectionError(TypeError):
    """Raised when an object lacks the nested ``items`` structure of a Section."""


class IndexOutOfRangeError(IndexError):
    """Raised when a positional mutator receives an index outside the section."""

    def __init__(self, index: int, size: int, operation: str):
        self.index = index
        self.size = size
        self.operation = operation
        super().__init__(
            f"Index {index} is out of range for {operation} on a section with {size} items"
        )


@dataclass
class SectionOptions:
    """Options used to create a Section.

    Attributes:
        title: Section title.
        weight: Weight of the section itself inside a parent.
        item_weight: Default weight for plain strings added to the section.
        parameters: Values for ``{{key}}`` placeholders in added strings.
    """
    title: Optional[str] = None
    weight: Optional[float] = DEFAULT_WEIGHT
    item_weight: Optional[float] = DEFAULT_ITEM_WEIGHT
    parameters: Parameters = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SectionOptions":
        """Create SectionOptions from a dictionary.

        Raises:
            ValueError: If validation fails.
        """
        is_valid, errors = validate_section_options(data)
        if not is_valid:
            raise ValueError(f"Invalid section options: {'; '.join(errors)}")
        return cls(
            title=data.get("title"),
            weight=data.get("weight", DEFAULT_WEIGHT),
            item_weight=data.get("item_weight", DEFAULT_ITEM_WEIGHT),
            parameters=dict(data.get("parameters") or {}),
        )

    def with_overrides(self, **changes: Any) -> "SectionOptions":
        """Return a copy with the non-None ``changes`` applied.

        ``parameters`` are merged over the existing ones rather than replaced.
        """
        values = {
            "title": self.title,
            "weight": self.weight,
            "item_weight": self.item_weight,
            "parameters": dict(self.parameters),
        }
        for key, value in changes.items():
            if value is None:
                continue
            if key == "parameters":
                values["parameters"] = merge(values["parameters"], value)
            else:
                values[key] = value
        return SectionOptions(**values)


def validate_section_options(data: Any) -> tuple[bool, list[str]]:
    """Validate a section options dictionary.

    Returns:
        A tuple of (is_valid, errors).
    """
    if not isinstance(data, dict):
        return False, ["Section options must be a dictionary"]

    errors: list[str] = []
    unknown = set(data) - {"title", "weight", "item_weight", "parameters"}
    if unknown:
        errors.append(f"Unknown section options: {', '.join(sorted(unknown))}")

    title = data.get("title")
    if title is not None and not isinstance(title, str):
        errors.append("Field 'title' must be a string")

    for name in ("weight", "item_weight"):
        value = data.get(name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            errors.append(f"Field '{name}' must be a number")

    if data.get("parameters") is not None:
        _, parameter_errors = validate_parameters(data["parameters"])
        errors.extend(parameter_errors)

    return len(errors) == 0, errors


class Section(Generic[T]):
    """Ordered, nestable container of weighted items.

    Example:
        section = Section(title="Rules", item_weight=0.5, parameters={"lang": "Python"})
        section.append("Write {{lang}}").append("Keep it short", weight=2.0)
        section.items[0].text    # 'Write Python'
        section.items[0].weight  # 0.5
        section.items[1].weight  # 2.0
    """

    def __init__(
        self,
        title: Optional[str] = None,
        weight: Optional[float] = DEFAULT_WEIGHT,
        item_weight: Optional[float] = DEFAULT_ITEM_WEIGHT,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> None:
        self.title = title
        self.weight = weight
        self.item_weight = item_weight
        self.parameters: Parameters = dict(parameters or {})
        self.item_type = item_type
        self.items: list[Union[T, "Section[T]"]] = []

    @classmethod
    def from_options(cls, options: SectionOptions, item_type: type = Weighted) -> "Section":
        return cls(
            title=options.title,
            weight=options.weight,
            item_weight=options.item_weight,
            parameters=options.parameters,
            item_type=item_type,
        )

    def _resolve(
        self,
        item: Any,
        weight: Optional[float],
        parameters: Optional[Parameters],
    ) -> list[Union[T, "Section[T]"]]:
        """Turn a mutator argument into the list of items to place."""
        if isinstance(item, (list, tuple)):
            resolved: list = []
            for element in item:
                resolved.extend(self._resolve(element, weight, parameters))
            return resolved
        if isinstance(item, str):
            return [create_weighted(
                item,
                weight=weight if weight is not None else self.item_weight,
                parameters=merge(self.parameters, parameters),
                item_type=self.item_type,
            )]
        if isinstance(item, (Weighted, Section)):
            return [item]
        raise TypeError(
            f"Cannot add {type(item).__name__} to a section; "
            "expected a string, Weighted item, Section or list of those"
        )

    def append(self, item: Any, weight: Optional[float] = None,
               parameters: Optional[Parameters] = None) -> "Section[T]":
        """Add an item, nested section or list of them at the end."""
        self.items.extend(self._resolve(item, weight, parameters))
        return self

    def add(self, item: Any, weight: Optional[float] = None,
            parameters: Optional[Parameters] = None) -> "Section[T]":
        """Alias of :meth:`append`."""
        return self.append(item, weight=weight, parameters=parameters)

    def prepend(self, item: Any, weight: Optional[float] = None,
                parameters: Optional[Parameters] = None) -> "Section[T]":
        """Add an item, nested section or list of them at the start.

        A list keeps its order, so ``prepend([a, b])`` yields ``[a, b, ...]``.
        """
        self.items[0:0] = self._resolve(item, weight, parameters)
        return self

    def insert(self, index: int, item: Any, weight: Optional[float] = None,
               parameters: Optional[Parameters] = None) -> "Section[T]":
        """Insert before ``index``; ``index == len(items)`` appends.

        Raises:
            IndexOutOfRangeError: If ``index`` is negative or past the end.
        """
        if not 0 <= index <= len(self.items):
            raise IndexOutOfRangeError(index, len(self.items), "insert")
        self.items[index:index] = self._resolve(item, weight, parameters)
        return self

    def replace(self, index: int, item: Any, weight: Optional[float] = None,
                parameters: Optional[Parameters] = None) -> "Section[T]":
        """Replace the item at ``index``; a list replaces it with a run of items.

        Raises:
            IndexOutOfRangeError: If no item exists at ``index``.
        """
        self._check_index(index, "replace")
        self.items[index:index + 1] = self._resolve(item, weight, parameters)
        return self

    def remove(self, index: int) -> "Section[T]":
        """Remove the item at ``index``.

        Raises:
            IndexOutOfRangeError: If no item exists at ``index``.
        """
        self._check_index(index, "remove")
        del self.items[index]
        return self

    def _check_index(self, index: int, operation: str) -> None:
        if not 0 <= index < len(self.items):
            raise IndexOutOfRangeError(index, len(self.items), operation)

    def to_dict(self) -> dict[str, Any]:
        """Plain nested representation, accepted by :func:`convert_to_section`."""
        return {
            "title": self.title,
            "weight": self.weight,
            "items": [item.to_dict() for item in self.items],
        }

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Union[T, "Section[T]"]]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"Section(title={self.title!r}, weight={self.weight!r}, items={len(self.items)})"


def is_section(obj: Any) -> bool:
    """Check whether an object has the shape of a section (a list of ``items``)."""
    if isinstance(obj, Section):
        return True
    if isinstance(obj, dict):
        return isinstance(obj.get("items"), list)
    return isinstance(getattr(obj, "items", None), list)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def convert_to_section(obj: Any, options: Union[SectionOptions, dict, None] = None,
                       item_type: type = Weighted) -> Section:
    """Rebuild a Section from a section-like object.

    Leaves are read from their ``text``; the options' item weight and
    parameters apply at every depth.

    Args:
        obj: A mapping or object with ``title`` and ``items``.
        options: SectionOptions, or a mapping accepted by
            :meth:`SectionOptions.from_dict`; defaults to SectionOptions().
        item_type: Weighted subclass for the rebuilt leaves.

    Returns:
        A new Section.

    Raises:
        NotASectionError: If ``obj`` (or a nested entry that is not a leaf)
            lacks ``items``.
        ValueError: If ``options`` is a mapping that fails validation.
    """
    if not is_section(obj):
        raise NotASectionError(f"Object is not a section: {obj!r}")

    if isinstance(options, dict):
        options = SectionOptions.from_dict(options)
    options = options or SectionOptions()
    section = Section(
        title=_field(obj, "title"),
        weight=options.weight,
        item_weight=options.item_weight,
        parameters=options.parameters,
        item_type=item_type,
    )
    for item in _field(obj, "items"):
        if is_section(item):
            section.append(convert_to_section(item, options, item_type))
        elif isinstance(item, str):
            section.append(item)
        elif _field(item, "text") is not None:
            section.append(str(_field(item, "text")))
        else:
            raise NotASectionError(f"Section entry has neither text nor items: {item!r}")
    return section
