from __future__ import annotations

from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as ModelValidationError

from .cipher import is_valid_text, transform_for_role
from .constants import ENCODING, MAX_PAYLOAD_SIZE
from .errors import ValidationError
from .roles import Role


def _first_bad_symbol(value: str) -> str:
    return next(symbol for symbol in value if not is_valid_text(symbol))


def _describe(exc: ModelValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "request"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def _decode(raw: bytes, what: str) -> str:
    try:
        return raw.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise ValidationError(f"{what} is not ASCII text: {exc}") from exc


class SymbolModel(BaseModel):
    """Base for payloads whose text fields must stay inside the 27-symbol alphabet."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SymbolModel":
        try:
            return cls(**data)
        except ModelValidationError as exc:
            raise ValidationError(_describe(exc)) from exc


class CipherRequest(SymbolModel):
    """The text/key pair a client sends, checked before it is ciphered."""

    text: str = Field(..., max_length=MAX_PAYLOAD_SIZE, description="Plaintext or ciphertext")
    key: str = Field(..., max_length=MAX_PAYLOAD_SIZE, description="One-time pad, at least as long as text")

    @field_validator("text", "key")
    @classmethod
    def _check_alphabet(cls, value: str) -> str:
        if not is_valid_text(value):
            raise ValueError(f"contains bad character {_first_bad_symbol(value)!r}")
        return value

    @model_validator(mode="after")
    def _check_key_length(self) -> "CipherRequest":
        if len(self.key) < len(self.text):
            raise ValueError(f"key of length {len(self.key)} is too short for text of length {len(self.text)}")
        return self

    @classmethod
    def build(cls, text: str, key: str) -> "CipherRequest":
        return cls.from_dict({"text": text, "key": key})

    @classmethod
    def from_wire(cls, text: bytes, key: bytes) -> "CipherRequest":
        return cls.build(_decode(text, "text"), _decode(key, "key"))

    @property
    def text_bytes(self) -> bytes:
        return self.text.encode(ENCODING)

    @property
    def key_bytes(self) -> bytes:
        return self.key.encode(ENCODING)

    def apply(self, role: Union[str, Role]) -> "CipherResult":
        """Run the cipher direction for `role` over this request."""
        return CipherResult(text=transform_for_role(role)(self.text, self.key))


class CipherResult(SymbolModel):
    text: str

    @field_validator("text")
    @classmethod
    def _check_alphabet(cls, value: str) -> str:
        if not is_valid_text(value):
            raise ValueError(f"contains bad character {_first_bad_symbol(value)!r}")
        return value

    @classmethod
    def from_wire(cls, raw: bytes) -> "CipherResult":
        return cls.from_dict({"text": _decode(raw, "result")})

    @property
    def text_bytes(self) -> bytes:
        return self.text.encode(ENCODING)


__all__ = ["SymbolModel", "CipherRequest", "CipherResult"]
