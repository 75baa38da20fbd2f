"""Token server token model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from pytokenserver._constants import MAX_TIMESTAMP

_MAX_UID = 2**64 - 1


class TokenServerToken(BaseModel):
    """Credentials returned by a successful token exchange.

    Parameters
    ----------
    id : str
        Opaque token identifier, sent as the Hawk id to the storage node.
    key : str
        Shared MAC key for signing storage requests.
    api_endpoint : str
        Base URL of the storage node.  Always ends with ``str(uid)``.
    uid : int
        Storage user id.
    hashed_fxa_uid : str
        Account identifier hashed by the server, safe to log and report.
    duration_in_seconds : int or None
        Token lifetime the server granted, when reported.
    remote_timestamp : int
        Server clock at response time, in milliseconds since the epoch.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(min_length=1, strict=True)
    key: str = Field(min_length=1, strict=True, repr=False)
    api_endpoint: str = Field(min_length=1, strict=True)
    uid: int = Field(ge=0, le=_MAX_UID, strict=True)
    hashed_fxa_uid: str = Field(
        strict=True,
        validation_alias=AliasChoices("hashed_fxa_uid", "hashedFxAUID"),
    )
    duration_in_seconds: int | None = Field(
        default=None,
        ge=0,
        strict=True,
        validation_alias=AliasChoices("duration", "duration_in_seconds"),
    )
    remote_timestamp: int = Field(
        ge=0,
        le=MAX_TIMESTAMP,
        strict=True,
        validation_alias=AliasChoices("remoteTimestamp", "remote_timestamp"),
    )

    @model_validator(mode="after")
    def _check_endpoint_uid(self) -> TokenServerToken:
        if not self.is_valid():
            raise ValueError(f"api_endpoint does not end with uid {self.uid}")
        return self

    def is_valid(self) -> bool:
        """Whether ``api_endpoint`` ends with the decimal string of ``uid``."""
        return self.api_endpoint.endswith(str(self.uid))

    def as_json(self) -> dict[str, Any]:
        """Return the token as a JSON-safe dict using wire key names."""
        payload: dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "api_endpoint": self.api_endpoint,
            "uid": self.uid,
            "hashed_fxa_uid": self.hashed_fxa_uid,
            "remoteTimestamp": self.remote_timestamp,
        }
        if self.duration_in_seconds is not None:
            payload["duration"] = self.duration_in_seconds
        return payload

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> TokenServerToken:
        """Rebuild a token from :meth:`as_json` output.

        Raises ``pydantic.ValidationError`` when *payload* is not a valid token.
        """
        return cls.model_validate(payload)
