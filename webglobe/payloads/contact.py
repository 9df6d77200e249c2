"""
Registration contact payload
https://api.webglobe.cz/#/reference/domains/register-contacts/create-register-contact
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class Contact(BaseModel):
    """
    Payload for creating a registration contact.

    Instances are immutable: every setter returns a new Contact, so calls
    can be chained without sharing state between call sites.

    Example:
        contact = (
            Contact()
            .set_legal_form("FO")
            .set_contact_name("Jan Novak")
            .set_email("jan@example.cz")
            .set_country("CZ")
        )
        client.contact_create(contact)
    """

    model_config = ConfigDict(frozen=True)

    action: str = "create"
    single_tld: Optional[str] = None
    type: Optional[str] = None
    # "SRO" limited liability company, "AS" joint stock company, "FO" natural person
    legal_form: Optional[str] = None
    street: Optional[str] = None
    town: Optional[str] = None
    postcode: Optional[str] = None
    # ISO 3166-1 alpha-2
    country: Optional[str] = None
    email: Optional[str] = None
    # EPP style +CCC.NNNNNNNNNN (+420.193729382)
    phone: Optional[str] = None
    contact_name: Optional[str] = None
    # ISO 639-1 ("cs", "en", "hu", ...)
    lang: Optional[str] = None
    disclose: Optional[List[Any]] = None

    # Company section, not filled in for a natural person
    company_id: Optional[str] = None
    tax_id: Optional[str] = None
    vat_id: Optional[str] = None
    statutory_representative: Optional[str] = None
    company: Optional[str] = None

    def _with(self, **changes: Any) -> "Contact":
        return self.model_copy(update=changes)

    def set_action(self, action: str) -> "Contact":
        return self._with(action=action)

    def set_type(self, type: str = "REGISTRANT") -> "Contact":
        """Set contact type: "REGISTRANT", or "ADMIN" (EU only)"""
        return self._with(type=type)

    def set_single_tld(self, single_tld: str) -> "Contact":
        return self._with(single_tld=single_tld)

    def set_legal_form(self, legal_form: str) -> "Contact":
        return self._with(legal_form=legal_form)

    def set_street(self, street: str) -> "Contact":
        return self._with(street=street)

    def set_town(self, town: str) -> "Contact":
        return self._with(town=town)

    def set_postcode(self, postcode: str) -> "Contact":
        return self._with(postcode=postcode)

    def set_country(self, country: str) -> "Contact":
        return self._with(country=country)

    def set_email(self, email: str) -> "Contact":
        return self._with(email=email)

    def set_phone(self, phone: str) -> "Contact":
        return self._with(phone=phone)

    def set_contact_name(self, contact_name: str) -> "Contact":
        return self._with(contact_name=contact_name)

    def set_lang(self, lang: str) -> "Contact":
        return self._with(lang=lang)

    def set_disclose(self, disclose: List[Any]) -> "Contact":
        return self._with(disclose=list(disclose))

    def set_company_id(self, company_id: str) -> "Contact":
        """Required for every legal form except a natural person (FO)"""
        return self._with(company_id=company_id)

    def set_tax_id(self, tax_id: str) -> "Contact":
        return self._with(tax_id=tax_id)

    def set_vat_id(self, vat_id: str) -> "Contact":
        return self._with(vat_id=vat_id)

    def set_statutory_representative(self, statutory_representative: str) -> "Contact":
        """Person representing an organization"""
        return self._with(statutory_representative=statutory_representative)

    def set_company(self, company: str) -> "Contact":
        """Required for every legal form except a natural person (FO)"""
        return self._with(company=company)

    def to_payload(self) -> Dict[str, Any]:
        """
        Build the request body.

        Returns:
            {"action": ..., "contact_data": {...}} where contact_data holds
            every field that is neither "" nor None
        """
        fields = self.model_dump()
        action = fields.pop("action")
        contact_data = {
            key: value for key, value in fields.items()
            if value is not None and value != ""
        }
        return {"action": action, "contact_data": contact_data}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), indent=4)
