from datetime import datetime
from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = ["BaseModel", "datetime"]


class BaseModel(PydanticBaseModel):
  """Models are snake_case in Python and camelCase in Firestore and JSON."""
  model_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
  )

  def to_wire(self) -> dict:
    return self.model_dump(by_alias=True, mode="json")
