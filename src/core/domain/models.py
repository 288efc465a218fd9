"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los modelos inmutables (`frozen=True`) garantizan que una petición, su
  política de reintentos y su especificación HTTP no cambian durante la
  ejecución.

Nota:
- Estos modelos describen *qué* se pide a la API de Mayar, no *cómo* se envía.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

DEFAULT_BASE_URL = "https://api.mayar.id/hl/v1"
DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class Resource(str, Enum):
    """Categorías de entidades expuestas por la API."""

    BALANCE = "balance"
    INVOICE = "invoice"
    COUPON = "coupon"
    CUSTOMER = "customer"


class Credentials(BaseModel):
    """Credencial ya resuelta (bearer API key) y base URL opcional."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(
        ...,
        min_length=1,
        description="API key enviada como `Authorization: Bearer <api_key>`.",
    )
    base_url: str | None = Field(
        default=None,
        description="Base URL de la API; si falta se usa la pública de Mayar.",
    )

    def resolved_base_url(self) -> str:
        return self.base_url or DEFAULT_BASE_URL


class RetryPolicy(BaseModel):
    """Política de reintentos compartida (solo lectura) por todos los intentos.

    El backoff es lineal: antes del reintento `k` se espera
    `retry_delay_ms * k` milisegundos.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Reintentos máximos tras el primer intento.",
    )
    retry_delay_ms: int = Field(
        default=500,
        ge=0,
        le=30_000,
        description="Retardo base (ms) que se multiplica por el número de intento.",
    )
    retryable_status_codes: frozenset[int] = Field(
        default=DEFAULT_RETRYABLE_STATUS_CODES,
        description="Status HTTP considerados transitorios.",
    )

    def should_retry(self, status_code: int, attempt: int) -> bool:
        return status_code in self.retryable_status_codes and attempt < self.max_retries

    def delay_seconds(self, attempt: int) -> float:
        return self.retry_delay_ms * attempt / 1000


class HttpCallSpec(BaseModel):
    """Forma concreta de una llamada HTTP, construida por el dispatcher."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    body: Any = None
    query: dict[str, Any] | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    as_json: bool = Field(
        default=True,
        description="Enviar el body serializado como JSON.",
    )


class OperationRequest(BaseModel):
    """Selección (resource, operation) más los parámetros crudos del usuario."""

    model_config = ConfigDict(frozen=True)

    resource: Resource
    operation: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)

    def param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)


class InvoiceItem(BaseModel):
    """Línea de factura.

    Las reglas (quantity >= 1, rate >= 0.01) las aplica
    `core.validators.require_invoice_items`, para que el fallo sea un
    `ValidationError` del dominio y no un error de Pydantic.
    """

    model_config = ConfigDict(extra="ignore")

    quantity: int | None = None
    rate: int | float | None = None
    description: str | None = None


class CouponDiscount(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    discount_type: str | None = Field(default=None, alias="discountType")
    eligible_customer_type: str | None = Field(default=None, alias="eligibleCustomerType")
    minimum_purchase: float | None = Field(default=None, alias="minimumPurchase")
    value: float | None = None
    total_coupons: int | None = Field(default=None, alias="totalCoupons")


class CouponCode(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: str | None = None
    type: str | None = None


class CouponSpec(BaseModel):
    """Cupón a crear; `products` ya viene parseado desde su JSON crudo."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    expired_at: str | None = Field(default=None, alias="expiredAt")
    discount: CouponDiscount = Field(default_factory=CouponDiscount)
    coupon: CouponCode = Field(default_factory=CouponCode)
    products: Any = Field(default_factory=list)

    def to_body(self) -> dict[str, Any]:
        """Body camelCase tal y como lo espera `/coupon/create`."""

        return {
            "expiredAt": self.expired_at,
            "name": self.name,
            "discount": self.discount.model_dump(by_alias=True, exclude_none=True),
            "coupon": self.coupon.model_dump(by_alias=True, exclude_none=True),
            "products": self.products,
        }


class ExecutionOptions(BaseModel):
    """Opciones por invocación.

    Acepta tanto los nombres camelCase del framework invocante
    (`continueOnFail`, `maxRetries`, `retryDelayMs`) como snake_case.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    continue_on_fail: bool = Field(default=False, alias="continueOnFail")
    max_retries: int = Field(default=0, ge=0, le=5, alias="maxRetries")
    retry_delay_ms: int = Field(default=500, ge=0, le=30_000, alias="retryDelayMs")
    debug: bool = False

    @model_validator(mode="before")
    @classmethod
    def _drop_unset(cls, data: Any) -> Any:
        # Un valor None equivale a "no configurado": se usa el default.
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_retries=self.max_retries, retry_delay_ms=self.retry_delay_ms)


class DebugMeta(BaseModel):
    """Metadatos auxiliares de la petición saliente (solo troubleshooting)."""

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    body: Any = None
    query: dict[str, Any] | None = None


class DispatchResult(BaseModel):
    """Respuesta de la API más el campo auxiliar de debug opcional.

    Por qué un envoltorio:
    - El payload semántico nunca se muta; `to_payload` construye un objeto
      nuevo cuando hay que añadir `_meta`.
    """

    model_config = ConfigDict(frozen=True)

    response: Any = None
    meta: DebugMeta | None = None

    def to_payload(self) -> Any:
        if self.meta is None:
            return self.response
        meta = self.meta.model_dump(mode="json", exclude_none=True)
        if isinstance(self.response, Mapping):
            return {**self.response, "_meta": meta}
        return {"data": self.response, "_meta": meta}


class OutputItem(BaseModel):
    """Sobre de salida para el framework invocante."""

    model_config = ConfigDict(frozen=True)

    payload: Any = Field(
        default=None,
        description="Valor serializable a JSON (respuesta o registro de error).",
    )
