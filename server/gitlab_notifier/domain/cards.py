# server/gitlab_notifier/domain/cards.py

from __future__ import annotations
"""
Carte de notification (modèle indépendant du transport) et rendu Feishu.

NotificationCard.to_payload() produit le corps attendu par un bot Feishu :
    {"msg_type": "interactive", "card": {"header": {...}, "elements": [...]}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class CardColor(str, Enum):
    GREEN = "green"  # succès / brouillon
    RED = "red"      # échec / cible main|master
    BLUE = "blue"


@dataclass(frozen=True)
class CardAction:
    text: str
    url: str


@dataclass(frozen=True)
class NotificationCard:
    title: str
    template: CardColor
    fields: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    note: Optional[str] = None
    action: Optional[CardAction] = None

    def body_markdown(self) -> str:
        return "\n".join(f"**{label}**: {value}" for label, value in self.fields)

    def to_payload(self) -> dict[str, Any]:
        elements: list[dict[str, Any]] = [
            {"tag": "div", "text": {"tag": "lark_md", "content": self.body_markdown()}},
        ]
        if self.note is not None:
            elements.append({"tag": "hr"})
            elements.append({"tag": "div", "text": {"tag": "lark_md", "content": self.note}})
        if self.action is not None:
            elements.append(
                {
                    "tag": "action",
                    "actions": [
                        {
                            "tag": "button",
                            "text": {"tag": "plain_text", "content": self.action.text},
                            "url": self.action.url,
                            "type": "default",
                        }
                    ],
                }
            )
        return {
            "msg_type": "interactive",
            "card": {
                "header": {
                    "title": {"tag": "plain_text", "content": self.title},
                    "template": self.template.value,
                },
                "elements": elements,
            },
        }
