from typing import Literal

from pydantic import BaseModel


class SubscriptionAction(BaseModel):
    action: Literal["create_checkout_session", "create_portal_session", "cancel_subscription"]
