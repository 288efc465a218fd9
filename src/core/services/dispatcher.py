"""Dispatcher de operaciones (resource, operation) -> petición HTTP.

Por qué una tabla cerrada:
- Cada par soportado es una entrada de `ROUTES` con su builder y los
  parámetros que lee; no hay cadenas abiertas de condicionales.
- Los builders validan en el orden de declaración de los campos antes de
  construir el `HttpCallSpec`, así ningún input inválido llega a la red.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from core.domain.errors import MalformedInputError
from core.domain.models import (
    CouponCode,
    CouponDiscount,
    CouponSpec,
    DebugMeta,
    DispatchResult,
    ExecutionOptions,
    HttpCallSpec,
    InvoiceItem,
    OperationRequest,
    Resource,
)
from core.interfaces.credentials import CredentialStore
from core.interfaces.parameters import ParameterSource
from core.services.request_executor import RequestExecutor
from core.validators import (
    require_distinct,
    require_email,
    require_integer,
    require_invoice_items,
    require_mobile,
    require_non_empty_string,
    require_number_range,
    require_optional_iso_date,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = "mayarApi"
NO_OPERATION_PAYLOAD: dict[str, Any] = {"message": "No operation executed"}
DEFAULT_REDIRECT_URL = "https://web.mayar.id"


@dataclass(frozen=True)
class Route:
    """Entrada de la tabla de rutas."""

    resource: Resource
    operation: str
    build: Callable[[OperationRequest], HttpCallSpec]
    params: tuple[tuple[str, Any], ...] = ()


def _collection_values(raw: Any, key: str) -> list[Any]:
    """Valores de un fixed-collection múltiple (`{"item": [...]}`) o lista simple."""

    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, Mapping):
        values = raw.get(key)
        if values is None:
            return []
        if isinstance(values, (list, tuple)):
            return list(values)
        return [values]
    return []


def _collection_value(raw: Any, key: str = "value") -> dict[str, Any]:
    """Valor de un fixed-collection simple (`{"value": {...}}`) o mapping simple."""

    if not isinstance(raw, Mapping):
        return {}
    nested = raw.get(key)
    if isinstance(nested, Mapping):
        return dict(nested)
    return dict(raw)


def _stripped(value: Any) -> Any:
    """Texto sin espacios en los extremos; se valida y se envía el mismo valor."""

    return value.strip() if isinstance(value, str) else value


def _parse_products(raw: Any) -> Any:
    if raw is None:
        return []
    if not isinstance(raw, str):
        return raw
    if not raw.strip():
        return []
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedInputError("Products must be valid JSON") from exc


def _build_balance_get(request: OperationRequest) -> HttpCallSpec:
    return HttpCallSpec(method="GET", path="/balance")


def _build_invoice_create(request: OperationRequest) -> HttpCallSpec:
    name = request.param("name")
    email = _stripped(request.param("email"))
    mobile = _stripped(request.param("mobile"))
    expired_at = request.param("expiredAt")
    raw_items = _collection_values(request.param("items"), "item")

    require_non_empty_string("Name", name)
    require_email("Email", email)
    require_mobile("Mobile", mobile)
    require_optional_iso_date("Expired At", expired_at)
    require_invoice_items(raw_items)

    items = [
        item if isinstance(item, InvoiceItem) else InvoiceItem.model_validate(item)
        for item in raw_items
    ]
    body = {
        "name": name,
        "email": email,
        "mobile": mobile,
        "redirectUrl": request.param("redirectUrl"),
        "description": request.param("description"),
        "expiredAt": expired_at,
        "items": [item.model_dump(exclude_none=True) for item in items],
    }
    return HttpCallSpec(method="POST", path="/invoice/create", body=body)


def _build_invoice_get(request: OperationRequest) -> HttpCallSpec:
    invoice_id = request.param("invoiceId")
    require_non_empty_string("Invoice ID", invoice_id)
    return HttpCallSpec(method="GET", path=f"/invoice/{quote(invoice_id, safe='')}")


def _build_invoice_get_all(request: OperationRequest) -> HttpCallSpec:
    return HttpCallSpec(method="GET", path="/invoice")


def _build_coupon_create(request: OperationRequest) -> HttpCallSpec:
    products = _parse_products(request.param("products"))
    name = request.param("couponName")
    expired_at = request.param("couponExpiredAt")
    discount = _collection_value(request.param("discount"))
    coupon = _collection_value(request.param("coupon"))

    require_non_empty_string("Name", name)
    require_optional_iso_date("Expired At", expired_at)
    if discount.get("value") is not None:
        require_number_range("Discount Value", discount["value"], 0.01)
    if discount.get("totalCoupons") is not None:
        require_integer("Total Coupons", discount["totalCoupons"], 1)

    spec = CouponSpec(
        name=name,
        expired_at=expired_at,
        discount=CouponDiscount.model_validate(discount),
        coupon=CouponCode.model_validate(coupon),
        products=products,
    )
    return HttpCallSpec(method="POST", path="/coupon/create", body=spec.to_body())


def _build_coupon_get(request: OperationRequest) -> HttpCallSpec:
    coupon_id = request.param("couponId")
    require_non_empty_string("Coupon ID", coupon_id)
    return HttpCallSpec(method="GET", path=f"/coupon/{quote(coupon_id, safe='')}")


def _build_coupon_get_all(request: OperationRequest) -> HttpCallSpec:
    return HttpCallSpec(method="GET", path="/coupon")


def _build_customer_get_all(request: OperationRequest) -> HttpCallSpec:
    page = request.param("page")
    page_size = request.param("pageSize")
    require_number_range("Page", page, 1)
    require_number_range("Page Size", page_size, 1, 100)
    return HttpCallSpec(
        method="GET",
        path="/customer",
        query={"page": page, "pageSize": page_size},
    )


def _build_customer_create(request: OperationRequest) -> HttpCallSpec:
    name = request.param("customerName")
    email = _stripped(request.param("customerEmail"))
    mobile = _stripped(request.param("customerMobile"))
    require_non_empty_string("Name", name)
    require_email("Email", email)
    require_mobile("Mobile", mobile)
    body = {"name": name, "email": email, "mobile": mobile}
    return HttpCallSpec(method="POST", path="/customer/create", body=body)


def _build_customer_update_email(request: OperationRequest) -> HttpCallSpec:
    from_email = _stripped(request.param("fromEmail"))
    to_email = _stripped(request.param("toEmail"))
    require_email("From Email", from_email)
    require_email("To Email", to_email)
    require_distinct("From Email", from_email, "To Email", to_email)
    body = {"fromEmail": from_email, "toEmail": to_email}
    return HttpCallSpec(method="POST", path="/customer/update", body=body)


_ROUTE_LIST: tuple[Route, ...] = (
    Route(Resource.BALANCE, "get", _build_balance_get),
    Route(
        Resource.INVOICE,
        "create",
        _build_invoice_create,
        params=(
            ("name", ""),
            ("email", ""),
            ("mobile", ""),
            ("redirectUrl", DEFAULT_REDIRECT_URL),
            ("description", ""),
            ("expiredAt", ""),
            ("items", {}),
        ),
    ),
    Route(Resource.INVOICE, "get", _build_invoice_get, params=(("invoiceId", ""),)),
    Route(Resource.INVOICE, "getAll", _build_invoice_get_all),
    Route(
        Resource.COUPON,
        "create",
        _build_coupon_create,
        params=(
            ("couponName", ""),
            ("couponExpiredAt", ""),
            ("discount", {}),
            ("coupon", {}),
            ("products", "[]"),
        ),
    ),
    Route(Resource.COUPON, "get", _build_coupon_get, params=(("couponId", ""),)),
    Route(Resource.COUPON, "getAll", _build_coupon_get_all),
    Route(
        Resource.CUSTOMER,
        "getAll",
        _build_customer_get_all,
        params=(("page", 1), ("pageSize", 10)),
    ),
    Route(
        Resource.CUSTOMER,
        "create",
        _build_customer_create,
        params=(("customerName", ""), ("customerEmail", ""), ("customerMobile", "")),
    ),
    Route(
        Resource.CUSTOMER,
        "updateEmail",
        _build_customer_update_email,
        params=(("fromEmail", ""), ("toEmail", "")),
    ),
)

ROUTES: dict[tuple[Resource, str], Route] = {
    (route.resource, route.operation): route for route in _ROUTE_LIST
}


def find_route(resource: Any, operation: Any) -> Route | None:
    try:
        key = Resource(resource)
    except ValueError:
        return None
    return ROUTES.get((key, operation))


def read_request(route: Route, source: ParameterSource, item_index: int = 0) -> OperationRequest:
    """Lee de la fuente solo los parámetros que declara la ruta."""

    params = {
        name: source.get_parameter(name, item_index, default)
        for name, default in route.params
    }
    return OperationRequest(resource=route.resource, operation=route.operation, params=params)


class OperationDispatcher:
    """Valida, construye y ejecuta la petición de un `OperationRequest`."""

    def __init__(
        self,
        executor: RequestExecutor,
        credentials: CredentialStore,
        *,
        provider_name: str = PROVIDER_NAME,
    ) -> None:
        self._executor = executor
        self._credentials = credentials
        self._provider_name = provider_name

    async def dispatch(self, request: OperationRequest, options: ExecutionOptions) -> DispatchResult:
        route = ROUTES.get((request.resource, request.operation))
        if route is None:
            return DispatchResult(response=dict(NO_OPERATION_PAYLOAD))

        spec = route.build(request)
        logger.debug(
            "Dispatching %s.%s -> %s %s",
            request.resource.value,
            request.operation,
            spec.method,
            spec.path,
        )

        credentials = self._credentials.get_credentials(self._provider_name)
        response = await self._executor.execute(spec, options.retry_policy(), credentials)

        meta = None
        if options.debug:
            meta = DebugMeta(method=spec.method, path=spec.path, body=spec.body, query=spec.query)
        return DispatchResult(response=response, meta=meta)
