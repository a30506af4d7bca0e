from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AddressSnapshot(BaseModel):
    """Shipping address as typed at checkout; copied onto the order as-is."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str = Field(min_length=2)
    phone: str = Field(min_length=10)
    street: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2)
    pincode: str = Field(min_length=6)
