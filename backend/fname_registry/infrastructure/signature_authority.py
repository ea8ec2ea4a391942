"""Signature Authority - registry signing key, verifier allow-list, EIP-712 checks.

Invariants:
    - verify() and co_sign() encode the message through build_attestation only
    - verify() never raises: malformed addresses or signatures yield False
    - co_sign() is deterministic (RFC 6979) and does no IO
    - The signing key and authorization strategy are read-only after init

Design Decisions:
    - eth_account for typed-data hashing, signing and address recovery
    - Authorization is a pluggable strategy (core/authorization.py); this
      class only forwards lookups so the validator has one collaborator
    - Singleton initialized on startup, mirroring db_manager
"""

import logging
from dataclasses import replace

from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from eth_utils import to_checksum_address

from fname_registry.core.attestation import AttestationDomain, build_attestation
from fname_registry.core.authorization import AuthorizationStrategy
from fname_registry.core.errors import ConfigurationError
from fname_registry.core.hex_codec import hex_to_bytes

logger = logging.getLogger(__name__)


class SignatureAuthority:
    """Co-signs accepted transfers and authenticates user signatures."""

    def __init__(
        self,
        signer_private_key: str,
        authorization: AuthorizationStrategy,
        domain: AttestationDomain | None = None,
    ):
        if not signer_private_key:
            raise ConfigurationError("SIGNER_PRIVATE_KEY")
        try:
            self._account = Account.from_key(signer_private_key)
        except ValueError as e:
            raise ConfigurationError("SIGNER_PRIVATE_KEY") from e
        self._authorization = authorization
        domain = domain or AttestationDomain()
        self.domain = replace(
            domain,
            verifying_contract=to_checksum_address(domain.verifying_contract),
        )

    @property
    def signer_address(self) -> str:
        """Checksummed address of the registry signing key."""
        return self._account.address

    def authorized_verifier(self, fid: int) -> str | None:
        return self._authorization.authorized_verifier(fid)

    def _signable(self, username: str, timestamp: int, owner: str) -> SignableMessage:
        attestation = build_attestation(
            username, timestamp, to_checksum_address(owner), self.domain,
        )
        return encode_typed_data(full_message=attestation)

    def verify(
        self,
        username: str,
        timestamp: int,
        owner: str,
        signature: str,
        expected_address: str,
    ) -> bool:
        """True iff signature over the attestation recovers to expected_address."""
        try:
            recovered = Account.recover_message(
                self._signable(username, timestamp, owner),
                signature=hex_to_bytes(signature),
            )
        except Exception as e:  # any decoding or recovery failure is a bad signature
            logger.debug(
                f"Signature recovery failed: {e}", extra={"username": username},
            )
            return False
        return recovered.lower() == expected_address.lower()

    def co_sign(self, username: str, timestamp: int, owner: str) -> bytes:
        """Registry signature over the same attestation the user signed."""
        signed = self._account.sign_message(
            self._signable(username, timestamp, owner),
        )
        return bytes(signed.signature)


# Singleton (initialized on startup)
signature_authority: SignatureAuthority | None = None


def init_signature_authority(
    signer_private_key: str,
    authorization: AuthorizationStrategy,
    domain: AttestationDomain | None = None,
) -> SignatureAuthority:
    global signature_authority
    signature_authority = SignatureAuthority(
        signer_private_key, authorization, domain,
    )
    logger.info(
        f"Registry signer loaded: {signature_authority.signer_address}",
    )
    return signature_authority


def get_signature_authority() -> SignatureAuthority:
    """FastAPI dependency for the process-wide signature authority."""
    if not signature_authority:
        raise ConfigurationError("SIGNER_PRIVATE_KEY")
    return signature_authority
