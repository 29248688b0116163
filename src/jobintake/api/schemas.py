from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jobintake.types import IngestionInput


class IngestRequest(IngestionInput):
    pass


class ParseJobRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    extracted_text: str = Field(alias="extractedText", min_length=50)
    url: str | None = None
    page_title: str | None = Field(default=None, alias="pageTitle")


class InboxPostRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    extracted_text: str = Field(alias="extractedText", min_length=50)
    url: str | None = None
    page_title: str | None = Field(default=None, alias="pageTitle")


class InboxPostResponse(BaseModel):
    ok: bool = True
    token: str
