import hashlib
import logging
import random
import time
from typing import Any, Mapping

import requests

from .config import Settings, get_settings
from .errors import ResponseParseError, TransfertoError, TransportError
from .metrics import transferto_request_latency_seconds, transferto_requests_total
from .parser import txt_to_dict

logger = logging.getLogger(__name__)

TOPUP_FIELDS = ("destination_msisdn", "msisdn", "operatorid", "skuid", "product", "sms")

# Metric label values; anything else is counted as "other".
KNOWN_ACTIONS = frozenset({"pricelist", "msisdn_info", "topup", "simulation"})


def _now_millis() -> int:
    return int(time.time() * 1000)


def generate_nonce() -> str:
    """Unix time in milliseconds followed by a random number in [1, 1000]."""
    now = _now_millis()
    rnd = random.randint(1, 1000)
    return f"{now}{rnd}"


def sign(login: str, token: str, key: str) -> str:
    return hashlib.md5((login + token + key).encode("utf-8")).hexdigest()


def response_text(response) -> str:
    """Body of a response as text, read as UTF-8 unless the server names a charset."""
    headers = getattr(response, "headers", None) or {}
    if "charset" not in headers.get("Content-Type", "").lower():
        response.encoding = "utf-8"
    return response.text


class TransfertoClient:
    """Client for the TransferTo airtime top-up API.

    Every request is signed with the ``login``/``token`` pair. It is sent as an
    HTTP GET, and the text body is parsed into a dict. A non-zero
    ``error_code`` raises :class:`TransfertoError`. Network, HTTP status and
    parse failures raise :class:`TransportError`.

    ``session`` can be any object with a ``requests``-compatible ``get``,
    for example a ``requests.Session``. By default the module-level
    ``requests`` API is used.
    """

    def __init__(
        self,
        login: str,
        token: str,
        endpoint: str | None = None,
        timeout: float | None = None,
        session: Any = None,
        settings: Settings | None = None,
    ):
        if not isinstance(login, str) or not login:
            raise ValueError("login must be a non-empty string")
        if not isinstance(token, str) or not token:
            raise ValueError("token must be a non-empty string")

        settings = settings or get_settings()
        self._login = login
        self._token = token
        self.endpoint = endpoint or settings.endpoint
        self.timeout = timeout if timeout is not None else settings.timeout_seconds
        self.default_currency = settings.default_currency
        self.session = session if session is not None else requests

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> "TransfertoClient":
        settings = settings or get_settings()
        return cls(settings.login, settings.token, settings=settings, **kwargs)

    @property
    def login(self) -> str:
        return self._login

    def __repr__(self) -> str:
        return f"{type(self).__name__}(login={self._login!r}, endpoint={self.endpoint!r})"

    def send_request(self, data: Mapping[str, Any]) -> dict[str, str | list[str]]:
        key = generate_nonce()
        md5 = sign(self._login, self._token, key)
        query = {**data, "login": self._login, "key": key, "md5": md5}
        action = data.get("action")
        action = action if isinstance(action, str) and action in KNOWN_ACTIONS else "other"

        logger.debug("Sending TransferTo request", extra={"action": action})
        started = time.perf_counter()
        try:
            response = self.session.get(self.endpoint, params=query, timeout=self.timeout)
            response.raise_for_status()
            if not 200 <= response.status_code < 300:
                raise requests.exceptions.HTTPError(f"{response.status_code} Not a success status", response=response)
        except requests.exceptions.HTTPError as e:
            status_code = getattr(e.response, "status_code", None)
            transferto_requests_total.labels(action=action, outcome="transport_error").inc()
            logger.error(
                f"TransferTo returned HTTP {status_code}",
                extra={"action": action, "status_code": status_code},
            )
            raise TransportError(f"HTTP {status_code} from TransferTo", status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            transferto_requests_total.labels(action=action, outcome="transport_error").inc()
            logger.error(f"TransferTo request failed: {e}", extra={"action": action})
            raise TransportError(str(e)) from e
        finally:
            transferto_request_latency_seconds.labels(action=action).observe(time.perf_counter() - started)

        try:
            result = txt_to_dict(response_text(response))
        except ResponseParseError:
            transferto_requests_total.labels(action=action, outcome="transport_error").inc()
            logger.error("Could not parse TransferTo response", extra={"action": action})
            raise

        if result.get("error_code") == "0":
            transferto_requests_total.labels(action=action, outcome="success").inc()
            return result

        error_code = result.get("error_code")
        error_txt = result.get("error_txt")
        transferto_requests_total.labels(action=action, outcome="provider_error").inc()
        logger.warning(
            f"TransferTo rejected request: {error_txt}",
            extra={"action": action, "error_code": error_code},
        )
        raise TransfertoError(error_txt, error_code)

    def get_countries(self):
        return self.send_request({
            "action": "pricelist",
            "info_type": "countries",
        })

    def get_country(self, country_id):
        return self.send_request({
            "action": "pricelist",
            "info_type": "country",
            "content": country_id,
        })

    def get_operator(self, operator_id):
        return self.send_request({
            "action": "pricelist",
            "info_type": "operator",
            "content": operator_id,
        })

    def get_msisdn_info(self, msisdn, options: Mapping[str, Any] | None = None):
        """Look up a number with ``msisdn_info``.

        ``options`` override the defaults (``delivered_amount_info``,
        ``return_service_fee`` and ``return_promo`` set to 1, and the default
        currency). ``action`` and ``destination_msisdn`` are always applied
        last, so the caller cannot change them.
        """
        payload = {
            "delivered_amount_info": 1,
            "return_service_fee": 1,
            "currency": self.default_currency,
            "return_promo": 1,
            **(options or {}),
            "action": "msisdn_info",
            "destination_msisdn": msisdn,
        }
        return self.send_request(payload)

    def topup(self, fields: Mapping[str, Any] | None = None, **kwargs):
        """Execute a top-up, or simulate it when ``simulate`` is truthy.

        Accepted fields are ``destination_msisdn``, ``msisdn``, ``operatorid``,
        ``skuid``, ``product``, ``sms`` and ``currency``. Other keys are ignored.
        Fields left as ``None`` are not sent.
        """
        options = {**(fields or {}), **kwargs}
        currency = options.get("currency")
        payload = {
            "action": "simulation" if options.get("simulate") else "topup",
            "return_service_fee": 1,
            "return_promo": 1,
            "delivered_amount_info": 1,
        }
        for name in TOPUP_FIELDS:
            payload[name] = options.get(name)
        payload["currency"] = currency if currency is not None else self.default_currency
        return self.send_request(payload)


def create(login: str, token: str, **kwargs) -> TransfertoClient:
    return TransfertoClient(login, token, **kwargs)
