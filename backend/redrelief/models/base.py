from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoreModel(BaseModel):
    """Python-side snake_case, camelCase in documents and on the wire."""
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

    def to_changes(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True, exclude_none=True)
