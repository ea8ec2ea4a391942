"""Canonical Attestation - the one message both users and the registry sign.

Invariants:
    - build_attestation is the ONLY encoder of (username, timestamp, owner);
      verify and co-sign both call it, so what users sign is what we check
    - Output is an EIP-712 typed-data document (UserNameProof)

Design Decisions:
    - Plain dict output: eth_account consumes it directly via encode_typed_data,
      and core stays free of crypto imports
"""

from dataclasses import dataclass

DOMAIN_NAME = "Farcaster name verification"
DOMAIN_VERSION = "1"
DEFAULT_CHAIN_ID = 1
DEFAULT_VERIFYING_CONTRACT = "0xe3be01d99baa8db9905b33a3ca391238234b79d1"

PRIMARY_TYPE = "UserNameProof"

ATTESTATION_TYPES: dict[str, list[dict[str, str]]] = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    PRIMARY_TYPE: [
        {"name": "name", "type": "string"},
        {"name": "timestamp", "type": "uint256"},
        {"name": "owner", "type": "address"},
    ],
}


@dataclass(frozen=True)
class AttestationDomain:
    """EIP-712 domain separating registry signatures from other typed data."""
    chain_id: int = DEFAULT_CHAIN_ID
    verifying_contract: str = DEFAULT_VERIFYING_CONTRACT

    def to_dict(self) -> dict:
        return {
            "name": DOMAIN_NAME,
            "version": DOMAIN_VERSION,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


def build_attestation(
    username: str, timestamp: int, owner: str, domain: AttestationDomain,
) -> dict:
    """Build the typed-data document for a username proof.

    owner must already be a checksummed (or all-lowercase) address string.
    """
    return {
        "types": ATTESTATION_TYPES,
        "primaryType": PRIMARY_TYPE,
        "domain": domain.to_dict(),
        "message": {
            "name": username,
            "timestamp": timestamp,
            "owner": owner,
        },
    }
