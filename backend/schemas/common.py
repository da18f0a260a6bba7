import enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base for everything persisted in the store: camelCase on the wire and in
# the JSON documents, snake_case in Python.
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# Payment modes accepted at the counter
class PaymentMode(str, enum.Enum):
    CASH = "Cash"
    UPI = "UPI"
    CARD = "Card"
    CREDIT = "Credit"


# Invoice states; checkout only ever produces PAID
class InvoiceStatus(str, enum.Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"
    CANCELLED = "Cancelled"
