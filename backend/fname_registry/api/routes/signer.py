"""Signer - publishes the registry's co-signing address for client verification."""

from fastapi import APIRouter, Depends

from fname_registry.infrastructure.signature_authority import (
    SignatureAuthority, get_signature_authority,
)
from fname_registry.schemas.transfer import SignerResponse

router = APIRouter(prefix="/signer", tags=["signer"])


@router.get("", response_model=SignerResponse)
async def get_signer(
    authority: SignatureAuthority = Depends(get_signature_authority),
):
    return SignerResponse(signer=authority.signer_address)
