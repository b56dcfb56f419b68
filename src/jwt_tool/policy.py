"""
Validation policy for decoded tokens.

A policy is built once from the defaults plus any caller overrides and is
never modified afterwards.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

__all__ = ["ABSENT", "ValidationPolicy", "build_policy"]


class _Absent:
    """Marker for a claim that is missing from the payload altogether.

    Distinct from ``None``, which stands for a claim present with a JSON
    ``null`` value.
    """

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

_ALLOW_LIST_FIELDS = ("allowable_issuers", "allowable_subjects", "allowable_audiences")


def _normalise_allow_list(name: str, value: Any) -> tuple[Any, ...] | None:
    # None and False both disable the check.
    if value is None or value is False:
        return None
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise TypeError(
            f"{name} must be an iterable of allowed values, None or False; "
            f"got {type(value).__name__}"
        )
    return tuple(value)


@dataclass(frozen=True)
class ValidationPolicy:
    """Options controlling which checks run when a token is validated.

    Allow-lists are ``None`` when disabled.  Include :data:`ABSENT` in an
    allow-list to admit tokens that do not carry that claim at all.
    """

    allowable_issuers: tuple[Any, ...] | None = None
    allowable_subjects: tuple[Any, ...] | None = None
    allowable_audiences: tuple[Any, ...] | None = None

    # Seconds of slack applied to the exp, nbf and iat checks.
    timing_tolerance: float = 0

    validate_expiration_time_claim: bool = True
    validate_not_before_claim: bool = True
    validate_issued_at_claim: bool = False

    verify_signature: bool = True

    def __post_init__(self) -> None:
        for name in _ALLOW_LIST_FIELDS:
            object.__setattr__(
                self, name, _normalise_allow_list(name, getattr(self, name))
            )

        tolerance = self.timing_tolerance
        if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
            raise ValueError(
                f"timing_tolerance must be a number, got {type(tolerance).__name__}"
            )
        if tolerance < 0:
            raise ValueError(f"timing_tolerance must be non-negative, got {tolerance}")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in dataclasses.fields(cls))

    def merged(self, overrides: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationPolicy:
        """Return a new policy with *overrides* applied on top of this one."""
        changes = dict(overrides or {})
        changes.update(kwargs)
        unknown = set(changes) - self.field_names()
        if unknown:
            raise TypeError(
                f"Unknown validation option(s): {', '.join(sorted(unknown))}"
            )
        return dataclasses.replace(self, **changes)


def build_policy(
    policy: ValidationPolicy | Mapping[str, Any] | None = None,
) -> ValidationPolicy:
    """Resolve *policy* into a complete :class:`ValidationPolicy`.

    - ``None``              -> the defaults
    - ``ValidationPolicy``  -> used as-is
    - mapping               -> partial override merged over the defaults
    """
    if policy is None:
        return ValidationPolicy()
    if isinstance(policy, ValidationPolicy):
        return policy
    if isinstance(policy, Mapping):
        return ValidationPolicy().merged(policy)
    raise TypeError(
        f"policy must be a ValidationPolicy, a mapping or None; got {type(policy).__name__}"
    )
