import uuid

from sqlmodel import Field, SQLModel

from localization.core.base_models import TimestampedTable, TimestampResponseMixin


class ThirdPartyConfigBase(SQLModel):
    code: str = Field(min_length=1, max_length=255, index=True)
    name: str = Field(min_length=1, max_length=255)
    type: str = Field(min_length=1, max_length=100, index=True)
    value: str = Field(min_length=1)
    group: str = Field(min_length=1, max_length=100, index=True)


class ThirdPartyConfig(ThirdPartyConfigBase, TimestampedTable, table=True):
    """Provider configuration entry (API keys, regions) looked up by code."""

    __tablename__ = "third_party_config"


class ThirdPartyConfigCreate(SQLModel):
    code: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    type: str = Field(min_length=1, max_length=100)
    value: str = Field(min_length=1)
    group: str = Field(min_length=1, max_length=100)


class ThirdPartyConfigUpdate(SQLModel):
    code: str | None = Field(default=None, min_length=1, max_length=255)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: str | None = Field(default=None, min_length=1, max_length=100)
    value: str | None = Field(default=None, min_length=1)
    group: str | None = Field(default=None, min_length=1, max_length=100)


class ThirdPartyConfigFilter(SQLModel):
    code: str | None = None
    type: str | None = None
    group: str | None = None


class ThirdPartyConfigPublic(ThirdPartyConfigBase, TimestampResponseMixin):
    id: uuid.UUID
