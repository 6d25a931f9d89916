"""
Tchaik player models - request and response bodies of the /api/players endpoints.
"""
import json
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator


class PlayerKeys(BaseModel):
    """Response of GET /api/players/: every player key known to the host."""
    keys: Optional[List[str]] = None

    def to_json(self) -> str:
        """Two-space indented JSON, keys in the order the host sent them."""
        return json.dumps(self.model_dump(), indent=2, ensure_ascii=False)


class Player(BaseModel):
    """
    Represents a player as returned by GET /api/players/{key}.

    A multi-player carries the keys of its child players in ``playerKeys``;
    a single player has none.
    """
    model_config = ConfigDict(extra="ignore")

    key: str = ""
    playerKeys: Optional[List[str]] = None

    @property
    def is_multi_player(self) -> bool:
        """True if the player groups other players."""
        return self.playerKeys is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'key': self.key,
            'playerKeys': self.playerKeys,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def __repr__(self) -> str:
        if self.is_multi_player:
            return f"Player({self.key} -> {','.join(self.playerKeys)})"
        return f"Player({self.key})"


class CreatePlayerRequest(BaseModel):
    """Body of POST /api/players/."""
    key: str
    playerKeys: List[str]


class ActionValue(BaseModel):
    """
    Optional typed value of a player action.

    ``kind`` tags which of the value fields is set. An absent value is left
    out of the request body entirely rather than sent as null.
    """
    kind: Literal['absent', 'number', 'boolean'] = 'absent'
    number: Optional[float] = None
    boolean: Optional[bool] = None

    @model_validator(mode="after")
    def check_tag(self) -> "ActionValue":
        """Exactly the field named by ``kind`` is set."""
        has_number = self.number is not None
        has_boolean = self.boolean is not None
        if (has_number, has_boolean) != (self.kind == 'number', self.kind == 'boolean'):
            raise ValueError(f"value of kind '{self.kind}' must set only the matching field")
        return self

    @classmethod
    def absent(cls) -> "ActionValue":
        return cls()

    @classmethod
    def of_number(cls, number: float) -> "ActionValue":
        return cls(kind='number', number=number)

    @classmethod
    def of_boolean(cls, boolean: bool) -> "ActionValue":
        return cls(kind='boolean', boolean=boolean)

    @property
    def is_absent(self) -> bool:
        return self.kind == 'absent'

    @property
    def payload(self) -> Union[float, bool, None]:
        """The JSON value to send, None when absent."""
        if self.kind == 'number':
            return self.number
        if self.kind == 'boolean':
            return self.boolean
        return None


class PlayerAction(BaseModel):
    """Body of PUT /api/players/{key}."""
    action: str
    value: ActionValue = ActionValue()

    def to_payload(self) -> dict:
        """Request body; ``value`` only appears when the action carries one."""
        data = {'action': self.action}
        if not self.value.is_absent:
            data['value'] = self.value.payload
        return data
