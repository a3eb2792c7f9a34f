"""Storefront filter state kept in the page URL.

The filter panel on collection and category pages stores its whole
selection in the query string so filtered views can be shared and
survive navigation. This module is the pure mapping between a URL and
that selection, plus a small stateful driver that mirrors the panel's
interactions (toggle a checkbox, drag the price slider, clear all).
"""

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlencode

from starlette.datastructures import URL, QueryParams

from sportsmart.catalog.identifiers import split_tokens

DEFAULT_SORT = "featured"
DEFAULT_PRICE_BOUNDS: tuple[float, float] = (0, 100000)

BRAND_PARAM = "brand"
SUB_CATEGORY_PARAM = "sub_category"
CATEGORY_PARAM = "category"
PRICE_MIN_PARAM = "price_min"
PRICE_MAX_PARAM = "price_max"
SORT_PARAM = "sort"
PAGE_PARAM = "page"


def _parse_number(value: str | None) -> float | None:
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _format_number(value: float) -> str:
    """Render 500.0 as "500" and 499.5 as "499.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass
class FilterState:
    """Facet selection shown by the filter panel.

    Attributes:
        brands: Selected brand ids.
        sub_categories: Selected sub-category ids (as strings).
        categories: Selected category ids.
        price: Selected (min, max) shop price.
        sort: Sort key.
    """

    brands: list[str] = field(default_factory=list)
    sub_categories: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    price: tuple[float, float] = DEFAULT_PRICE_BOUNDS
    sort: str = DEFAULT_SORT

    @classmethod
    def from_query(
        cls,
        query: str | QueryParams,
        default_price: tuple[float, float] = DEFAULT_PRICE_BOUNDS,
    ) -> "FilterState":
        """Parse a selection from a query string.

        The price is only taken from the URL when both bounds are
        present; otherwise ``default_price`` is kept.

        Args:
            query: Query string (without ``?``) or parsed parameters.
            default_price: Price used when the URL doesn't carry one.

        Returns:
            Parsed selection.
        """
        params = query if isinstance(query, QueryParams) else QueryParams(query)

        price = default_price
        price_min = _parse_number(params.get(PRICE_MIN_PARAM))
        price_max = _parse_number(params.get(PRICE_MAX_PARAM))
        if price_min is not None and price_max is not None:
            price = (price_min, price_max)

        return cls(
            brands=split_tokens(params.get(BRAND_PARAM)),
            sub_categories=split_tokens(params.get(SUB_CATEGORY_PARAM)),
            categories=split_tokens(params.get(CATEGORY_PARAM)),
            price=price,
            sort=params.get(SORT_PARAM) or DEFAULT_SORT,
        )


# ============================================================================
# URL Building
# ============================================================================


def _set_param(items: list[tuple[str, str]], key: str, value: str) -> list[tuple[str, str]]:
    """Set a parameter in place, keeping the position of its first occurrence."""
    updated: list[tuple[str, str]] = []
    placed = False
    for item_key, item_value in items:
        if item_key != key:
            updated.append((item_key, item_value))
        elif not placed:
            updated.append((key, value))
            placed = True
    if not placed:
        updated.append((key, value))
    return updated


def _delete_param(items: list[tuple[str, str]], key: str) -> list[tuple[str, str]]:
    return [(k, v) for k, v in items if k != key]


def build_filter_url(url: str | URL, state: FilterState) -> str:
    """Write a selection into a URL's query string.

    Unrelated parameters are preserved, ``page`` is dropped so a new
    selection starts at the first page, empty list facets are removed,
    and price and sort are always written.

    Args:
        url: Current URL (absolute or path-only).
        state: Selection to write.

    Returns:
        Path plus new query string.
    """
    current = URL(str(url))
    items = _delete_param(list(QueryParams(current.query).multi_items()), PAGE_PARAM)

    for key, values in (
        (BRAND_PARAM, state.brands),
        (SUB_CATEGORY_PARAM, state.sub_categories),
        (CATEGORY_PARAM, state.categories),
    ):
        if values:
            items = _set_param(items, key, ",".join(values))
        else:
            items = _delete_param(items, key)

    items = _set_param(items, PRICE_MIN_PARAM, _format_number(state.price[0]))
    items = _set_param(items, PRICE_MAX_PARAM, _format_number(state.price[1]))
    items = _set_param(items, SORT_PARAM, state.sort)

    return f"{current.path}?{urlencode(items)}"


def _toggle(values: list[str], value: str) -> list[str]:
    return [v for v in values if v != value] if value in values else [*values, value]


# ============================================================================
# Filter Panel Driver
# ============================================================================


class FilterStateSync:
    """Keeps a filter selection and the page URL in step.

    Every committed change is written to the URL and handed to the
    ``navigate`` callback (a shallow navigation without scroll reset);
    the selection is then re-read from that URL so the URL stays the
    single source of truth. Dragging the price slider only updates
    ``live_price`` until the drag is released.

    Example usage:
        sync = FilterStateSync("/collections/cricket?sort=newest", navigate=router.push)
        sync.toggle_brand("4f6c...")
        sync.commit_price((500, 20000))
    """

    def __init__(
        self,
        url: str,
        price_bounds: tuple[float, float] = DEFAULT_PRICE_BOUNDS,
        navigate: Callable[[str], Any] | None = None,
    ) -> None:
        """Initialize from the current page URL.

        Args:
            url: Current page URL.
            price_bounds: Full price range of the slider.
            navigate: Called with each new URL.
        """
        self.price_bounds = price_bounds
        self._navigate = navigate
        self.url = url
        self.state = FilterState.from_query(URL(url).query, default_price=price_bounds)
        self.live_price = self.state.price

    def on_url_change(self, url: str) -> FilterState:
        """Re-read the selection after the URL changed (navigation, back button).

        Args:
            url: New page URL.

        Returns:
            The rehydrated selection.
        """
        self.url = url
        self.state = FilterState.from_query(URL(url).query, default_price=self.state.price)
        self.live_price = self.state.price
        return self.state

    def toggle_brand(self, brand_id: str) -> str:
        """Select or deselect a brand."""
        return self._apply(brands=_toggle(self.state.brands, brand_id))

    def toggle_sub_category(self, sub_category_id: str | int) -> str:
        """Select or deselect a sub-category."""
        return self._apply(
            sub_categories=_toggle(self.state.sub_categories, str(sub_category_id))
        )

    def toggle_category(self, category_id: str) -> str:
        """Select or deselect a category."""
        return self._apply(categories=_toggle(self.state.categories, category_id))

    def set_sort(self, sort: str) -> str:
        """Change the sort order."""
        return self._apply(sort=sort)

    def drag_price(self, price: tuple[float, float]) -> None:
        """Track the slider while it is being dragged, without navigating."""
        self.live_price = price

    def commit_price(self, price: tuple[float, float]) -> str:
        """Apply the price range when the slider is released."""
        self.live_price = price
        return self._apply(price=price)

    def clear_all(self) -> str:
        """Reset every facet and navigate to the bare path."""
        self.state = FilterState(price=self.price_bounds)
        self.live_price = self.state.price
        path = URL(self.url).path
        self.url = path
        self._push(path)
        return path

    def _apply(self, **changes: Any) -> str:
        url = build_filter_url(self.url, replace(self.state, **changes))
        self._push(url)
        self.on_url_change(url)
        return url

    def _push(self, url: str) -> None:
        if self._navigate is not None:
            self._navigate(url)


def available_brands(
    brands: Iterable[dict[str, Any]],
    products: Iterable[dict[str, Any]],
    selected_categories: list[str],
    selected_brands: list[str],
) -> list[dict[str, Any]]:
    """Narrow the brand list to brands stocked in the selected categories.

    Selected brands stay visible so they can be deselected. With no
    category selected, or no products loaded, every brand is shown.

    Args:
        brands: Brand dicts with ``id``.
        products: Product dicts with ``category_id`` and ``brand_id``.
        selected_categories: Selected category ids.
        selected_brands: Selected brand ids.

    Returns:
        Brands to offer in the filter panel.
    """
    brands = list(brands)
    products = list(products)
    if not selected_categories or not products:
        return brands

    stocked = {
        str(product["brand_id"])
        for product in products
        if str(product["category_id"]) in selected_categories
    }
    return [
        brand
        for brand in brands
        if str(brand["id"]) in stocked or str(brand["id"]) in selected_brands
    ]
