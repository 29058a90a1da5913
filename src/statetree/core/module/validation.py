"""Definition validation.

Checks that every getter and mutation is callable and every action is a
callable or carries a callable ``handler``. Runs at registration time and for
every definition applied by a hot update.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from statetree.core.module.models import ModuleDefinition
from statetree.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class _Expectation:
    check: Callable[[Any], bool]
    expected: str


def _is_action(value: Any) -> bool:
    if callable(value):
        return True
    if isinstance(value, Mapping):
        return callable(value.get("handler"))
    return callable(getattr(value, "handler", None))


_FUNCTION = _Expectation(check=callable, expected="function")
_ACTION = _Expectation(check=_is_action, expected='function or object with "handler" function')

_SECTIONS: dict[str, _Expectation] = {
    "getters": _FUNCTION,
    "mutations": _FUNCTION,
    "actions": _ACTION,
}


def assert_raw_module(path: Sequence[str], definition: ModuleDefinition) -> None:
    """Validate one definition (children are validated when they register).

    Raises:
        ConfigurationError: On the first malformed entry, naming path, section,
            key and offending value.
    """
    for section, expectation in _SECTIONS.items():
        entries = getattr(definition, section)
        if not entries:
            continue
        for key, value in entries.items():
            if not expectation.check(value):
                raise ConfigurationError(
                    _assertion_message(path, section, key, value, expectation.expected),
                    path=path,
                    section=section,
                    key=key,
                    value=value,
                )


def _assertion_message(
    path: Sequence[str], section: str, key: str, value: Any, expected: str
) -> str:
    message = f'{section} should be {expected} but "{section}.{key}"'
    if path:
        message += f' in module "{".".join(path)}"'
    message += f" is {value!r}."
    return message
