"""
Weighted prompt items.

A Weighted item is the leaf of a Section tree: a piece of prompt text with
an optional weight. Parameters are substituted once, when the item is
created, and the item never changes afterwards.
"""

from dataclasses import dataclass
from typing import Optional

from .parameters import Parameters, apply


@dataclass(frozen=True)
class Weighted:
    """A unit of prompt text.

    Attributes:
        text: The text, with parameters already substituted.
        weight: Salience weight. ``None`` means the container default applies.
    """
    text: str
    weight: Optional[float] = None

    def to_dict(self) -> dict:
        return {"text": self.text, "weight": self.weight}


@dataclass(frozen=True)
class Instruction(Weighted):
    """Something the model is told to do."""


@dataclass(frozen=True)
class Content(Weighted):
    """Material the model should work on."""


@dataclass(frozen=True)
class Context(Weighted):
    """Background information for the model."""


@dataclass(frozen=True)
class Trait(Weighted):
    """A persona characteristic."""



def create_weighted(
    text: str,
    weight: Optional[float] = None,
    parameters: Optional[Parameters] = None,
    item_type: type = Weighted,
) -> Weighted:
    """Create a weighted item, substituting parameters into its text.

    Args:
        text: Raw text, possibly with ``{{key}}`` placeholders.
        weight: Optional weight.
        parameters: Values for placeholders.
        item_type: Weighted subclass to instantiate.

    Returns:
        A new item of ``item_type``.
    """
    return item_type(text=apply(text, parameters), weight=weight)


def create_instruction(text: str, weight: Optional[float] = None,
                       parameters: Optional[Parameters] = None) -> Instruction:
    return create_weighted(text, weight, parameters, Instruction)


def create_content(text: str, weight: Optional[float] = None,
                   parameters: Optional[Parameters] = None) -> Content:
    return create_weighted(text, weight, parameters, Content)


def create_context(text: str, weight: Optional[float] = None,
                   parameters: Optional[Parameters] = None) -> Context:
    return create_weighted(text, weight, parameters, Context)


def create_trait(text: str, weight: Optional[float] = None,
                 parameters: Optional[Parameters] = None) -> Trait:
    return create_weighted(text, weight, parameters, Trait)
