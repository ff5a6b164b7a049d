"""Pydantic request schemas for the Ordering API.

These are external contracts (anti-corruption layer): field names follow what
the storefront and the PayPal buttons send, and map onto checkout types.
"""

from pydantic import BaseModel, Field

from ordering.order.order import PaymentResult


class ApprovePayPalOrderRequest(BaseModel):
    order_id: str = Field(alias="orderID", min_length=1)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"orderID": "5O190127TN364715T"}]},
    }


class PaymentResultRequest(BaseModel):
    id: str = Field(min_length=1)
    status: str
    email_address: str = ""
    pricePaid: str = "0"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "5O190127TN364715T",
                    "status": "COMPLETED",
                    "email_address": "buyer@example.com",
                    "pricePaid": "27.00",
                }
            ]
        }
    }

    def to_payment_result(self) -> PaymentResult:
        return PaymentResult(
            id=self.id,
            status=self.status,
            email_address=self.email_address,
            price_paid=self.pricePaid,
        )
