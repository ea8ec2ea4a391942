"""Transfer Schemas - wire shapes for transfer submission and history.

Invariants:
    - owner is 0x + 40 hex chars; signatures are 0x + non-empty even-length hex
    - "from"/"to" on the wire map to from_fid/to_fid in Python
    - Responses render every bytes field as 0x-prefixed lowercase hex

Design Decisions:
    - The username is NOT format-checked here: an invalid name must surface as
      INVALID_USERNAME after authorization and signature checks, not as a 400
      VALIDATION_ERROR
"""

from pydantic import BaseModel, ConfigDict, Field

from fname_registry.core.domain_types import TransferRecord, TransferRequest
from fname_registry.core.hex_codec import bytes_to_hex

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
SIGNATURE_PATTERN = r"^0x([0-9a-fA-F]{2})+$"


class TransferCreate(BaseModel):
    """Transfer submission body."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(max_length=256)
    timestamp: int = Field(ge=0)
    owner: str = Field(pattern=ADDRESS_PATTERN)
    from_fid: int = Field(alias="from", ge=0)
    to_fid: int = Field(alias="to", ge=0)
    fid: int = Field(ge=0)  # fid authorizing the request
    signature: str = Field(pattern=SIGNATURE_PATTERN)

    def to_request(self) -> TransferRequest:
        return TransferRequest(
            username=self.name,
            timestamp=self.timestamp,
            owner=self.owner,
            from_fid=self.from_fid,
            to_fid=self.to_fid,
            user_signature=self.signature,
            user_fid=self.fid,
        )


class TransferResponse(BaseModel):
    """Public shape of a stored transfer."""
    id: int
    timestamp: int
    username: str
    owner: str
    from_fid: int = Field(serialization_alias="from")
    to_fid: int = Field(serialization_alias="to")
    user_signature: str
    server_signature: str

    @classmethod
    def from_record(cls, record: TransferRecord) -> "TransferResponse":
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            username=record.username,
            owner=bytes_to_hex(record.owner),
            from_fid=record.from_fid,
            to_fid=record.to_fid,
            user_signature=bytes_to_hex(record.user_signature),
            server_signature=bytes_to_hex(record.server_signature),
        )


class TransferEnvelope(BaseModel):
    transfer: TransferResponse


class TransferList(BaseModel):
    transfers: list[TransferResponse]


class SignerResponse(BaseModel):
    signer: str
