from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CartAddRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: int
    quantity: int = Field(default=1, ge=1)

class CartUpdateRequest(BaseModel):
    quantity: int
