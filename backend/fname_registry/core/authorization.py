"""Authorization Strategies - who may authorize a transfer on behalf of an fid.

Invariants:
    - authorized_verifier returns the address whose signature is accepted, or None
    - fid 0 is never authorized, under any strategy
    - Strategies are read-only after construction

Design Decisions:
    - Protocol over ABC: structural subtyping, any object with
      authorized_verifier() plugs in
    - AllowListAuthorization is the transitional gate (admin fids only);
      OpenRegistrationAuthorization is the extension point once users sign
      with their own custody addresses
"""

from typing import Callable, Mapping, Protocol

from fname_registry.core.domain_types import NO_FID


class AuthorizationStrategy(Protocol):
    """Contract for resolving the verifier address of a requesting fid."""
    def authorized_verifier(self, fid: int) -> str | None: ...


class AllowListAuthorization:
    """Only fids on the admin allow-list may submit transfers."""

    def __init__(self, admin_keys: Mapping[int, str]):
        self._admin_keys = {int(fid): address for fid, address in admin_keys.items()}

    def authorized_verifier(self, fid: int) -> str | None:
        if fid == NO_FID:
            return None
        return self._admin_keys.get(fid)

    @property
    def admin_fids(self) -> list[int]:
        return sorted(self._admin_keys)


class OpenRegistrationAuthorization:
    """Any fid may submit transfers, signed by its resolved custody address."""

    def __init__(self, resolve_custody: Callable[[int], str | None]):
        self._resolve_custody = resolve_custody

    def authorized_verifier(self, fid: int) -> str | None:
        if fid == NO_FID:
            return None
        return self._resolve_custody(fid)
