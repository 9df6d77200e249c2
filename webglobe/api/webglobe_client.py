"""
Webglobe API Client
Public operations of the Webglobe registrar REST API
https://api.webglobe.com/
"""

from typing import Any, Dict, List, Optional, Union

from webglobe.api.endpoints import ENDPOINTS, get_endpoint
from webglobe.api.error_extractor import get_path_value
from webglobe.api.pipeline import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TOTAL_TIMEOUT, RequestPipeline
from webglobe.api.session import DEFAULT_REFRESH_MARGIN, Credentials, Session
from webglobe.payloads import Contact, Order
from webglobe.utils.config import Settings, get_settings
from webglobe.utils.logger import get_logger


logger = get_logger(__name__)


class WebglobeClient:
    """
    Webglobe API client.

    Logs in on construction and keeps the JWT token fresh on its own.
    Operations return nothing; read the outcome of the latest call with
    get_response(), get_return_code() and get_error_code().

    Not thread-safe: share one instance between threads only behind a lock.
    """

    def __init__(
        self,
        api_url: str,
        login: str,
        password: str,
        currency: str = "CZK",
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        total_timeout: float = DEFAULT_TOTAL_TIMEOUT,
        refresh_margin: int = DEFAULT_REFRESH_MARGIN
    ):
        """
        Initialize the client and authenticate.

        Args:
            api_url: Base API URL (e.g., 'https://api.webglobe.com')
            login: Account login
            password: Account password
            currency: Currency for price queries
            connect_timeout: Connect timeout in seconds
            total_timeout: Total time allowed for one exchange, in seconds
            refresh_margin: Refresh the token this many seconds before expiry

        Raises:
            WebglobeError: If the initial login fails
        """
        self.currency = currency
        self.session = Session(Credentials(login, password), refresh_margin=refresh_margin)
        self.pipeline = RequestPipeline(
            api_url,
            self.session,
            connect_timeout=connect_timeout,
            total_timeout=total_timeout
        )

        logger.info(f"Webglobe Client initialized - Base URL: {self.pipeline.api_url}")

        self.session.authenticate(self.pipeline)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "WebglobeClient":
        """
        Create a client from Settings.

        Args:
            config: Optional Settings object. If None, loads from get_settings()
        """
        config = config or get_settings()
        return cls(
            config.webglobe_api_url,
            config.webglobe_login,
            config.webglobe_password,
            currency=config.webglobe_currency,
            connect_timeout=config.webglobe_connect_timeout,
            total_timeout=config.webglobe_total_timeout,
            refresh_margin=config.webglobe_refresh_margin
        )

    # ==================== Last exchange ====================

    def get_response(self) -> Any:
        """Decoded body of the last response"""
        return self.pipeline.last.body

    def get_return_code(self) -> Optional[int]:
        """HTTP status of the last response"""
        return self.pipeline.last.status_code

    def get_error_code(self) -> Any:
        """API error code of the last response, when its status was >= 400"""
        return self.pipeline.last.error_code

    def get_balance(self) -> Any:
        """Account balance cached from the login response"""
        return get_path_value(self.session.auth_payload, ("credit_account_info", "balance_base"))

    # ==================== Generic invocation ====================

    def invoke(self, name: str, payload: Optional[Dict[str, Any]] = None, **path_params: Any) -> None:
        """
        Call a catalogue endpoint by name.

        Args:
            name: Operation name from ENDPOINTS (e.g., 'domain_info_by_name')
            payload: Query parameters (GET) or JSON body
            **path_params: Values for the path template placeholders

        Raises:
            ConfigurationError: If the endpoint or its parameters are unknown
            WebglobeError: If the request fails
        """
        endpoint = get_endpoint(name)
        path = endpoint.build_path(**path_params)
        self.pipeline.dispatch(endpoint.method, path, payload)

    @staticmethod
    def endpoint_names() -> List[str]:
        return sorted(ENDPOINTS)

    # ==================== Account ====================

    def my_account(self) -> None:
        """Get restrictions of the logged in account"""
        self.invoke("my_account")

    # ==================== Order ====================

    def check_domain_das(self, domain: str) -> None:
        """Quick registry availability check of a domain"""
        self.invoke("check_domain_das", {"domain": domain})

    def check_domain(self, domain_name: str, tld: str, with_price: bool = False) -> None:
        """
        Check a domain name and its status in the Webglobe system.
        More detailed than check_domain_das.

        Args:
            domain_name: Domain name without TLD
            tld: Top-level domain
            with_price: Include prices in the response
        """
        payload = {
            "domain_name": domain_name,
            "toplevel": tld,
            "with_price": with_price,
            "currency": self.currency
        }
        self.invoke("check_domain", payload)

    def list_all_tld(self) -> None:
        """List all available TLDs with prices"""
        self.invoke("list_all_tld", {"apply_discounts": True, "with_price": True, "currency": self.currency})

    def list_of_registrants(self, tld: str) -> None:
        """Registrants available to the logged in customer for a TLD"""
        self.invoke("list_of_registrants", {"tld": tld})

    def order(self, payload: Union[Order, Dict[str, Any]]) -> None:
        """Submit an order"""
        if isinstance(payload, Order):
            payload = payload.to_payload()
        self.invoke("order", payload)

    def detail_order_by_id(self, order_id: Any) -> None:
        self.invoke("detail_order_by_id", order_id=order_id)

    # ==================== Registration contacts ====================

    def check_available_nic_id(self, tld: str, registrant_id: str) -> None:
        """
        Check whether a nic_id (registrant_id) can be registered for a TLD.
        CZ and SK only.

        Error codes:
            1221: cz nic id longer than 30 chars
            1222: invalid characters in cz nic id
            1223: sk nic id must have 3 to 16 chars
            1224: invalid characters in sk nic id
            1234: registry check failed
        """
        self.invoke("check_available_nic_id", {"tld": tld, "nic_id": registrant_id})

    def contact_create(self, payload: Union[Contact, Dict[str, Any]]) -> None:
        """Create a registration contact"""
        if isinstance(payload, Contact):
            payload = payload.to_payload()
        self.invoke("contact_create", payload)

    def contacts_list(self, page: int = 1) -> None:
        self.invoke("contacts_list", page=page)

    def contact_detail_by_id(self, contact_id: Any) -> None:
        self.invoke("contact_detail_by_id", contact_id=contact_id)

    def contact_create_info(self, tld: str) -> None:
        self.invoke("contact_create_info", tld=tld)

    # ==================== Domains ====================

    def domain_info_by_name(self, domain: str) -> None:
        self.invoke("domain_info_by_name", domain=domain)

    def domain_contacts(self, domain_id: Any) -> None:
        """Domain contacts; error code 1261 for TLDs that do not support it"""
        self.invoke("domain_contacts", domain_id=domain_id)

    def domain_registration_info(self, domain_id: Any) -> None:
        """Domain info straight from the registry, rate limited to 20 requests per minute"""
        self.invoke("domain_registration_info", domain_id=domain_id)

    def list_all_domains(self) -> None:
        self.invoke("list_all_domains")

    def send_auth_code(self, domain_id: Any) -> None:
        """Email the transfer-out auth code to the domain owner"""
        self.invoke("send_auth_code", domain_id=domain_id)

    # ==================== DNS ====================

    def dns_nsset_list(self) -> None:
        """CZ.NIC nssets, without pagination"""
        self.invoke("dns_nsset_list")

    def dns_nsset_show_by_id(self, dnsgroup_id: Any) -> None:
        self.invoke("dns_nsset_show_by_id", dnsgroup_id=dnsgroup_id)

    def nameservers_info(self, domain_id: Any) -> None:
        self.invoke("nameservers_info", domain_id=domain_id)

    def nameservers_group_list(self, domain_id: Any) -> None:
        self.invoke("nameservers_group_list", domain_id=domain_id)

    def nameservers_group_show(self, domain_id: Any, dns_group_id: Any) -> None:
        self.invoke("nameservers_group_show", domain_id=domain_id, dns_group_id=dns_group_id)

    # ==================== Invoices ====================

    def invoice_detail_by_id(self, invoice_id: Any) -> None:
        self.invoke("invoice_detail_by_id", invoice_id=invoice_id)

    def invoice_pay_by_credit(self, invoice_id: Any) -> None:
        self.invoke("invoice_pay_by_credit", {"use_credit": True}, invoice_id=invoice_id)

    # ==================== Services ====================

    def services_list(self, domain: str = "", page: int = 1, per_page: Any = "", package: str = "") -> None:
        """
        List services, optionally filtered.

        Args:
            domain: Domain filter; when set, page is always 1
            page: Page number
            per_page: Page size
            package: Package filter
        """
        if domain:
            page = 1
        payload = {
            "page": page,
            "per_page": per_page,
            "domain": domain,
            "package": package
        }
        self.invoke("services_list", {key: value for key, value in payload.items() if value})

    def service_update_by_id(self, service_id: Any, payload: Optional[Dict[str, Any]] = None) -> None:
        """Update a service, e.g. {"automated_billing": 0}"""
        self.invoke("service_update_by_id", payload or {}, service_id=service_id)
