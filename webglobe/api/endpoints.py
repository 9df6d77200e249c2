"""
Webglobe endpoint catalogue
Maps each public operation to its HTTP method and path template.
Reference: https://api.webglobe.com/
"""

import string
from typing import Any, Dict, NamedTuple, Tuple
from urllib.parse import quote

from webglobe.api.exceptions import ConfigurationError


class Endpoint(NamedTuple):
    method: str
    path: str

    @property
    def parameters(self) -> Tuple[str, ...]:
        """Names of the {placeholders} in the path template"""
        return tuple(
            name for _, name, _, _ in string.Formatter().parse(self.path) if name
        )

    def build_path(self, **params: Any) -> str:
        """
        Fill the path template with URL-quoted values.

        Raises:
            ConfigurationError: If a placeholder has no value or an unknown one is given
        """
        expected = set(self.parameters)
        missing = expected - params.keys()
        unexpected = params.keys() - expected
        if missing or unexpected:
            raise ConfigurationError(
                f"Path {self.path} expects parameters {sorted(expected)}, got {sorted(params)}"
            )
        return self.path.format(**{key: quote(str(value), safe="") for key, value in params.items()})


ENDPOINTS: Dict[str, Endpoint] = {
    # Account
    "my_account": Endpoint("GET", "/my-account"),

    # Order
    "check_domain_das": Endpoint("POST", "/order/checkDomainDas"),
    "check_domain": Endpoint("GET", "/order/checkDomainName"),
    "list_all_tld": Endpoint("GET", "/order/listTld"),
    "list_of_registrants": Endpoint("GET", "/order/listRegistrants"),
    "order": Endpoint("POST", "/order/submit"),
    "detail_order_by_id": Endpoint("GET", "/order/detailOrder/{order_id}"),

    # Registration contacts
    "check_available_nic_id": Endpoint("POST", "/reg/contacts/checkAvailableNicId"),
    "contact_create": Endpoint("POST", "/reg/contacts#create"),
    "contacts_list": Endpoint("GET", "/reg/contacts?page={page}&from="),
    "contact_detail_by_id": Endpoint("GET", "/reg/contacts/{contact_id}"),
    "contact_create_info": Endpoint("GET", "/reg/contacts/create?{tld}"),

    # Domains
    "domain_info_by_name": Endpoint("GET", "/domains/{domain}"),
    "domain_contacts": Endpoint("GET", "/domain/{domain_id}/list-contacts"),
    "domain_registration_info": Endpoint("GET", "/domain/{domain_id}/reg-info"),
    "list_all_domains": Endpoint("GET", "/domains?full=true"),
    "send_auth_code": Endpoint("POST", "/{domain_id}/auth-info"),

    # DNS
    "dns_nsset_list": Endpoint("GET", "/dns-nsset"),
    "dns_nsset_show_by_id": Endpoint("GET", "/dns-nsset/{dnsgroup_id}"),
    "nameservers_info": Endpoint("GET", "/{domain_id}/dns-set"),
    "nameservers_group_list": Endpoint("GET", "/{domain_id}/dns-group"),
    "nameservers_group_show": Endpoint("GET", "/{domain_id}/dns-group/{dns_group_id}"),

    # Invoices
    "invoice_detail_by_id": Endpoint("GET", "/invoices/{invoice_id}"),
    "invoice_pay_by_credit": Endpoint("PUT", "/invoices/{invoice_id}"),

    # Services
    "services_list": Endpoint("GET", "/services/service"),
    "service_update_by_id": Endpoint("PUT", "/services/service/{service_id}"),
}


def get_endpoint(name: str) -> Endpoint:
    """
    Look up an endpoint by operation name.

    Raises:
        ConfigurationError: If the name is not in the catalogue
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown endpoint: {name}. Valid options are: {', '.join(sorted(ENDPOINTS))}"
        ) from None
