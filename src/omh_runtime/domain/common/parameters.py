from __future__ import annotations

from typing import Any, Dict, List, Mapping

KEY_CLIENT = "client"
KEY_REQUESTER = "requester"
KEY_AUTH_TOKEN = "auth_token"
KEY_USER = "user"
KEY_PASSWORD = "password"

SINGLE_VALUED_KEYS = (KEY_CLIENT, KEY_REQUESTER, KEY_AUTH_TOKEN, KEY_USER, KEY_PASSWORD)


class MalformedParametersError(ValueError):
    pass


def decode_parameters(parameters: Mapping[Any, Any]) -> Dict[str, str]:
    """
    Decode a raw multi-valued parameter map into single values.

    Keys must be strings and values must be lists or tuples of strings.
    Authentication and client keys may carry at most one value; any other
    key keeps its first value. The requester is copied onto ``client`` when
    no client was given.
    """
    if not isinstance(parameters, Mapping):
        raise MalformedParametersError("The parameters are not a mapping.")

    decoded: Dict[str, str] = {}
    for key, values in parameters.items():
        if not isinstance(key, str):
            raise MalformedParametersError(f"A parameter key is not a string: {key!r}")
        if not isinstance(values, (list, tuple)):
            raise MalformedParametersError(f"The values for '{key}' are not a list.")
        checked: List[str] = []
        for value in values:
            if not isinstance(value, str):
                raise MalformedParametersError(f"A value for '{key}' is not a string: {value!r}")
            checked.append(value)
        if key in SINGLE_VALUED_KEYS and len(checked) > 1:
            raise MalformedParametersError(f"Multiple values were given: {key}")
        if checked:
            decoded[key] = checked[0]

    if KEY_CLIENT not in decoded and KEY_REQUESTER in decoded:
        decoded[KEY_CLIENT] = decoded[KEY_REQUESTER]
    return decoded
