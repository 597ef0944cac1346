from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextReply:
    text: str

    def to_dict(self) -> dict:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class MenuChoice:
    label: str
    value: str


@dataclass(frozen=True)
class MenuReply:
    """A short prompt with 3-4 labelled choices; choosing one sends ``value`` back."""

    text: str
    choices: tuple[MenuChoice, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not 3 <= len(self.choices) <= 4:
            raise ValueError("a menu needs 3 or 4 choices")

    def to_dict(self) -> dict:
        return {
            "type": "menu",
            "text": self.text,
            "choices": [{"label": c.label, "value": c.value} for c in self.choices],
        }


Reply = Union[TextReply, MenuReply]
