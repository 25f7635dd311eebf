"""Data models for secrets and the handle returned to their owner."""
from pydantic import BaseModel, ConfigDict, Field


class SecretRecord(BaseModel):
    """Plaintext side of a secret, only ever held in memory.

    Serialized and encrypted right after creation; rebuilt from the
    decrypted payload at retrieval time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    message: str = Field(min_length=1)
    one_time: bool = False

    def __repr__(self) -> str:
        # never leak the message through logs or tracebacks
        return f"<SecretRecord one_time={self.one_time}>"

    __str__ = __repr__


class SecretHandle(BaseModel):
    """Identifier and decryption key handed back to the secret's owner."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    key: str

    def __repr__(self) -> str:
        return f"<SecretHandle identifier={self.identifier}>"

    __str__ = __repr__
