"""
Tchaik Remote Library
Core functionality for talking to the Tchaik players REST API.
Can be used in the tchremote CLI or other frontends.
"""

import json
import math
import re
import sys
from typing import List, Optional

import requests
from pydantic import ValidationError

from player_status import ActionValue, CreatePlayerRequest, Player, PlayerAction, PlayerKeys


HOST_ENV = "TCH_ADDR"
PLAYER_KEY_ENV = "TCH_PLAYER_KEY"

PLAYERS_PATH = "/api/players/"

# Actions whose -value is sent as a number / boolean.
NUMBER_ACTIONS = ('setTime', 'setVolume')
BOOLEAN_ACTIONS = ('setVolumeMute',)

TRUE_LITERALS = ('1', 't', 'T', 'TRUE', 'true', 'True')
FALSE_LITERALS = ('0', 'f', 'F', 'FALSE', 'false', 'False')

_FLOAT_RE = re.compile(r'^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$')


class TchaikError(Exception):
    """Base class for every error the remote reports to the user."""


class ConfigurationError(TchaikError):
    """Address or player key could not be resolved."""


class ValueParseError(TchaikError):
    """An action value could not be interpreted."""

    def __init__(self, action: str, raw: str, expected: str):
        self.action = action
        self.raw = raw
        super().__init__(f'invalid value "{raw}" for action {action}: expected {expected}')


class RequestError(TchaikError):
    """The request never produced a response (DNS, refused connection, timeout)."""


class ResponseError(TchaikError):
    """The API answered with a status the operation does not accept."""

    def __init__(self, message: str, status_code: int, body: str = ''):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class DecodeError(TchaikError):
    """The response body is not the JSON document the operation expects."""


def parse_number(action: str, raw: str) -> float:
    """Parse a decimal or exponent literal into a finite float."""
    if not _FLOAT_RE.match(raw):
        raise ValueParseError(action, raw, "a number")
    number = float(raw)
    if not math.isfinite(number):
        raise ValueParseError(action, raw, "a number")
    return number


def parse_boolean(action: str, raw: str) -> bool:
    """Accept only the canonical boolean literals (no yes/no, on/off)."""
    if raw in TRUE_LITERALS:
        return True
    if raw in FALSE_LITERALS:
        return False
    raise ValueParseError(action, raw, "a boolean")


def parse_action_value(action: str, raw: Optional[str]) -> ActionValue:
    """
    Interpret the raw -value string for the given action.

    Args:
        action: Action name (e.g. setTime, setVolume, setVolumeMute, play)
        raw: Value as typed on the command line, may be empty or None

    Returns:
        The typed value; absent for untyped actions or an empty value

    Raises:
        ValueParseError: value does not parse for a typed action
    """
    if not raw:
        return ActionValue.absent()
    if action in NUMBER_ACTIONS:
        return ActionValue.of_number(parse_number(action, raw))
    if action in BOOLEAN_ACTIONS:
        return ActionValue.of_boolean(parse_boolean(action, raw))
    return ActionValue.absent()


def split_player_keys(create: str) -> List[str]:
    """Split a comma-separated key list, keeping empty segments."""
    return create.split(',')


def describe_validation_error(error: ValidationError) -> str:
    """One-line summary of a pydantic validation failure."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class TchaikClient:
    """Control players through the Tchaik REST API."""

    def __init__(self, addr: str, timeout: Optional[float] = None, verbose: bool = False):
        """
        Initialize the client.

        Args:
            addr: schema://host(:port) address of the REST API
            timeout: HTTP timeout in seconds (default: none)
            verbose: Print request/response trace lines
        """
        self.addr = addr
        self.base_url = addr.rstrip('/')
        self.timeout = timeout
        self.verbose = verbose

    def players_url(self, key: Optional[str] = None) -> str:
        """URL of the players collection, or of one player when key is given."""
        if key is None:
            return f"{self.base_url}{PLAYERS_PATH}"
        return f"{self.base_url}{PLAYERS_PATH}{key}"

    def _debug(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def _request(self, method: str, url: str, payload: Optional[dict] = None) -> requests.Response:
        """Issue a single request; transport failures become RequestError."""
        self._debug(f"{method} {url}")
        if payload is not None:
            self._debug(f"body: {json.dumps(payload)}")
        try:
            response = requests.request(method, url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RequestError(f"error performing request: {e}") from e
        except ValueError as e:
            # urllib3 rejects unusable timeouts before connecting
            raise RequestError(f"error performing request: {e}") from e
        self._debug(f"{response.status_code} {response.reason}")
        return response

    def get_player_keys(self) -> PlayerKeys:
        """
        List the keys of all players on the host.

        Raises:
            ResponseError: status other than 200, message carries the raw body
            DecodeError: body is not a key listing
        """
        response = self._request("GET", self.players_url())
        if response.status_code != 200:
            raise ResponseError(f"error: {response.text}", response.status_code, response.text)
        try:
            return PlayerKeys.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"error unmarshalling response: {describe_validation_error(e)}") from e

    def get_player(self, key: str) -> Player:
        """
        Fetch a player.

        The status code is not checked: whatever the host returns is decoded
        as a player.
        """
        response = self._request("GET", self.players_url(key))
        try:
            return Player.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"error unmarshalling response: {describe_validation_error(e)}") from e

    def create_player(self, key: str, player_keys: List[str]) -> None:
        """
        Create a multi-player grouping the given child players.

        Only 201 Created is success. The response body is not reported on
        failure.
        """
        data = CreatePlayerRequest(key=key, playerKeys=player_keys)
        response = self._request("POST", self.players_url(), data.model_dump())
        if response.status_code != 201:
            raise ResponseError(f"unexpected status code {response.status_code}", response.status_code)

    def delete_player(self, key: str) -> None:
        """Delete a player. Only 204 No Content is success."""
        response = self._request("DELETE", self.players_url(key))
        if response.status_code != 204:
            body = response.text.strip()
            raise ResponseError(f"error: {body}", response.status_code, body)

    def send_action(self, key: str, action: str, value: Optional[ActionValue] = None) -> None:
        """
        Send an action to a player.

        Args:
            key: Player key
            action: Action name (e.g. play, pause, setTime, setVolume, setVolumeMute)
            value: Typed value, left out of the request when absent

        Raises:
            ResponseError: status other than 200, message carries the trimmed body
        """
        data = PlayerAction(action=action, value=value if value is not None else ActionValue.absent())
        response = self._request("PUT", self.players_url(key), data.to_payload())
        if response.status_code != 200:
            body = response.text.strip()
            raise ResponseError(f"error: {body}", response.status_code, body)
