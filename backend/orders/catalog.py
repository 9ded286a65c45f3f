"""
Catalog lookup strategies.

The product catalog lives in another service. Order pricing only needs one
capability from it: the current unit price of a product, in cents.
"""
from abc import ABC, abstractmethod
import logging

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from sales_backend.exceptions import ProductNotFound, CatalogUnavailable

logger = logging.getLogger(__name__)


class BaseCatalog(ABC):
    """
    The Abstract Base Class for a catalog lookup.
    """

    @abstractmethod
    def get_unit_price_cents(self, product_id: str) -> int:
        """
        Return the unit price for ``product_id`` in cents.

        Raises:
            ProductNotFound: the catalog does not know the product
            CatalogUnavailable: the catalog could not be consulted
        """
        pass


class StaticPriceCatalog(BaseCatalog):
    """
    In-process price table. Used for local development and tests, and for
    venues that run without the catalog service.
    """

    def __init__(self, prices=None, **kwargs):
        self.prices = {str(k): int(v) for k, v in (prices or {}).items()}

    def get_unit_price_cents(self, product_id: str) -> int:
        try:
            return self.prices[str(product_id)]
        except KeyError:
            raise ProductNotFound(product_id)


class HttpCatalog(BaseCatalog):
    """
    Reads prices from the catalog service: ``GET {base_url}/products/{id}``
    answering with a JSON body containing ``price_cents``.
    """

    def __init__(self, base_url, timeout=5, session=None, **kwargs):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_unit_price_cents(self, product_id: str) -> int:
        url = f"{self.base_url}/products/{product_id}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Catalog request for product {product_id} failed: {e}")
            raise CatalogUnavailable(f"catalog service unreachable: {e}") from e

        if response.status_code == 404:
            raise ProductNotFound(product_id)
        if response.status_code != 200:
            logger.error(
                f"Catalog returned HTTP {response.status_code} for product {product_id}"
            )
            raise CatalogUnavailable(
                f"catalog service returned HTTP {response.status_code}"
            )

        try:
            return int(response.json()["price_cents"])
        except (ValueError, KeyError, TypeError) as e:
            raise CatalogUnavailable(
                f"catalog response for product {product_id} has no usable price_cents"
            ) from e


def get_catalog() -> BaseCatalog:
    """
    Build the catalog strategy configured in ``settings.SALES_CATALOG``.
    """
    config = dict(getattr(settings, "SALES_CATALOG", {}))
    backend_path = config.pop("BACKEND", "orders.catalog.StaticPriceCatalog")
    backend_class = import_string(backend_path)
    return backend_class(
        prices=config.get("PRICES"),
        base_url=config.get("BASE_URL", ""),
        timeout=config.get("TIMEOUT", 5),
    )
