"""
Domain order payload
https://api.webglobe.cz/#/reference/order/order/send-order
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from webglobe.api.exceptions import ConfigurationError


ORDER_TYPES = ("registration", "transfer", "server", "extra", "renew")


class Order(BaseModel):
    """
    Payload for submitting an order.

    Only "registration" orders have a known body layout. The other types
    are accepted but serialize to an empty payload.

    Example:
        order = (
            Order("registration")
            .set_domain_name("example.cz")
            .set_id_registrant(1234)
            .set_id_registrant_admin(1234)
            .set_group_id(42)
        )
        client.order(order)
    """

    model_config = ConfigDict(frozen=True)

    type: str
    payment_type: str = "credit"
    domain_name: str = ""
    period: int = 12
    pack: str = "registration"
    id_registrant: Optional[Any] = None
    id_registrant_admin: Optional[Any] = None
    dns_type: str = "G"
    nsset_id: Optional[Any] = None
    group_id: Optional[Any] = None
    currency: str = "CZK"

    def __init__(self, type: str, **data: Any):
        if type not in ORDER_TYPES:
            raise ConfigurationError(
                f"Unknown order type: {type}. Valid options are: {', '.join(ORDER_TYPES)}"
            )
        super().__init__(type=type, **data)

    def _with(self, **changes: Any) -> "Order":
        return self.model_copy(update=changes)

    def set_payment_type(self, payment_type: str) -> "Order":
        """Payment type: "credit" pays from credit, "transaction" by bank transfer"""
        return self._with(payment_type=payment_type)

    def set_domain_name(self, domain: str) -> "Order":
        return self._with(domain_name=domain)

    def set_pack(self, pack: str) -> "Order":
        return self._with(pack=pack)

    def set_period(self, period: int) -> "Order":
        """Registration period in months"""
        return self._with(period=period)

    def set_dns_type(self, dns_type: str) -> "Order":
        return self._with(dns_type=dns_type)

    def set_nsset_id(self, nsset_id: Any) -> "Order":
        """NSSET ID (NSSET:YOUR-ANY), CZ domains only"""
        return self._with(nsset_id=nsset_id)

    def set_group_id(self, group_id: Any) -> "Order":
        return self._with(group_id=group_id)

    def set_id_registrant(self, id_registrant: Any) -> "Order":
        """Webglobe ID of the domain owner contact"""
        return self._with(id_registrant=id_registrant)

    def set_id_registrant_admin(self, id_registrant_admin: Any) -> "Order":
        """Webglobe ID of the admin contact"""
        return self._with(id_registrant_admin=id_registrant_admin)

    def set_currency(self, currency: str) -> "Order":
        return self._with(currency=currency)

    def to_payload(self) -> Dict[str, Any]:
        if self.type == "registration":
            return self._registration_payload()
        # Only registration has a known body layout; other order types send {}
        return {}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), indent=4)

    def _registration_payload(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "order": {
                "payment_type": self.payment_type,
                "items": [
                    {
                        "name": self.domain_name,
                        "pack": self.pack,
                        "period": self.period,
                        "type": self.type,
                    }
                ],
                "default_regdata": {
                    "IDregistrant": self.id_registrant,
                    "type": "REGISTRANT",
                },
                "default_regcontacts": [
                    {
                        "IDregistrant": self.id_registrant_admin,
                        "type": "ADMIN",
                    }
                ],
                "default_dnsdata": {
                    "type": self.dns_type,
                    "nsset_id": self.nsset_id,
                    "group_id": self.group_id,
                },
            },
        }
