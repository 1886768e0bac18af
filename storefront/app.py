from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_stats
from .analytics.store import get_events, record_event
from .auth.dependencies import require_admin, require_user
from .auth.models import (
    LoginRequest,
    RegisterRequest,
    UserListResponse,
    UserOut,
    UserUpdate,
)
from .auth.users import (
    UserError,
    UserNotFound,
    authenticate,
    delete_user,
    get_user,
    list_users,
    register,
    update_user,
)
from .catalog import data_store
from .catalog.data_store import ProductNotFound
from .catalog.models import Product, ProductCreate, ProductListResponse, ProductUpdate
from .checkout import cart
from .checkout.cart import CartError
from .checkout.coupons import (
    CouponError,
    CouponNotFound,
    create_coupon,
    delete_coupon,
    list_coupons,
    update_coupon,
    validate_coupon,
)
from .checkout.models import (
    AddToCartRequest,
    AppliedCoupon,
    ApplyCouponRequest,
    CartResponse,
    Coupon,
    CouponCreate,
    CouponUpdate,
    UpdateCartLineRequest,
)
from .checkout.pricing import compute_totals
from .orders import store as order_store
from .orders.models import (
    Order,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    StatusUpdateRequest,
)
from .orders.store import OrderError, OrderNotFound
from .payments.models import (
    CheckoutPaymentOptions,
    PaymentSettings,
    PaymentSettingsUpdate,
)
from .payments.settings import (
    PaymentSettingsError,
    checkout_options,
    get_settings,
    is_method_enabled,
    update_settings,
)
from .recommendations.cache import cache_get, cache_set, get_cache_stats, invalidate
from .recommendations.models import RelatedProductOut, RelatedProductsResponse
from .recommendations.related import DEFAULT_LIMIT, get_related_products

logger = logging.getLogger(__name__)

app = FastAPI(title="Vasstra Storefront API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "vasstra-secret-change-in-production"),
)


def _coupon_http_error(exc: CouponError) -> HTTPException:
    status = 404 if isinstance(exc, CouponNotFound) else 400
    return HTTPException(status_code=status, detail=str(exc))


def _get_product_or_404(product_id: str) -> Product:
    try:
        return data_store.get_product(product_id)
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail="Product not found") from exc


def _get_order_for(order_id: str, user: dict) -> Order:
    try:
        order = order_store.get_order(order_id)
    except OrderNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if order.user_id != user["id"] and user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Unauthorized")
    return order


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    products = data_store.list_products()
    prices = [p.price for p in products]
    return {
        "categories": data_store.list_categories(),
        "price_range": {
            "min": min(prices) if prices else 0.0,
            "max": max(prices) if prices else 0.0,
        },
        "payment_methods": checkout_options().methods,
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/register", status_code=201)
def auth_register(body: RegisterRequest, request: Request) -> dict:
    try:
        user = register(body)
    except UserError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    session_user = {"id": user.id, "email": user.email, "name": user.name, "role": user.role}
    request.session["user"] = session_user
    return {"status": "ok", "user": session_user}


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Catalog endpoints ────────────────────────────────────────────────────


@app.get("/products", response_model=ProductListResponse)
def products(
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
) -> ProductListResponse:
    result = data_store.list_products(category=category, search=search, sort_by=sort_by)
    return ProductListResponse(products=result, total=len(result))


@app.get("/products/{product_id}", response_model=Product)
def product_detail(product_id: str) -> Product:
    product = _get_product_or_404(product_id)
    if not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.get("/products/{product_id}/related", response_model=RelatedProductsResponse)
def related_products(
    product_id: str,
    limit: int = Query(default=DEFAULT_LIMIT, ge=0, le=20),
) -> RelatedProductsResponse:
    reference = _get_product_or_404(product_id)
    if not reference.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    cached = cache_get(product_id, limit)
    if cached is not None:
        record_event("related_viewed", {"product_id": product_id, "cache_hit": True})
        return cached.model_copy(update={"cached": True})

    by_id = {p.id: p for p in data_store.list_products()}
    ranked = get_related_products(
        reference.to_catalog_item(),
        data_store.get_catalog_items(),
        limit=limit,
    )
    response = RelatedProductsResponse(
        product_id=product_id,
        related=[
            RelatedProductOut(
                product=by_id[entry.item.id],
                score=entry.score,
                source=entry.source,
            )
            for entry in ranked
        ],
    )
    cache_set(product_id, limit, response)
    record_event("related_viewed", {"product_id": product_id, "cache_hit": False})
    return response


# ── Cart & coupon endpoints ──────────────────────────────────────────────


@app.get("/cart", response_model=CartResponse)
def get_cart(request: Request) -> CartResponse:
    return cart.build_quote(request.session)


@app.post("/cart/items", response_model=CartResponse)
def add_to_cart(body: AddToCartRequest, request: Request) -> CartResponse:
    product = _get_product_or_404(body.product_id)
    try:
        cart.add_line(request.session, product, body.quantity, body.size, body.color)
    except CartError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return cart.build_quote(request.session)


@app.put("/cart/items/{index}", response_model=CartResponse)
def update_cart_line(index: int, body: UpdateCartLineRequest, request: Request) -> CartResponse:
    try:
        cart.update_quantity(request.session, index, body.quantity)
    except CartError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return cart.build_quote(request.session)


@app.delete("/cart/items/{index}", response_model=CartResponse)
def remove_cart_line(index: int, request: Request) -> CartResponse:
    try:
        cart.remove_line(request.session, index)
    except CartError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return cart.build_quote(request.session)


@app.delete("/cart", response_model=CartResponse)
def empty_cart(request: Request) -> CartResponse:
    cart.clear_cart(request.session)
    return cart.build_quote(request.session)


@app.post("/cart/coupon", response_model=CartResponse)
def apply_cart_coupon(body: ApplyCouponRequest, request: Request) -> CartResponse:
    try:
        applied = cart.apply_coupon(request.session, body.code)
    except CouponError as exc:
        record_event("coupon_rejected", {"code": body.code.strip().upper(), "reason": str(exc)})
        raise _coupon_http_error(exc) from exc
    record_event("coupon_applied", {"code": applied.code, "discount": applied.discount})
    return cart.build_quote(request.session)


@app.delete("/cart/coupon", response_model=CartResponse)
def remove_cart_coupon(request: Request) -> CartResponse:
    cart.remove_coupon(request.session)
    return cart.build_quote(request.session)


@app.get("/coupons/validate/{code}")
def validate_coupon_code(
    code: str,
    order_amount: float = Query(..., ge=0),
) -> dict[str, AppliedCoupon]:
    try:
        return {"coupon": validate_coupon(code, order_amount)}
    except CouponError as exc:
        raise _coupon_http_error(exc) from exc


@app.get("/payment-methods", response_model=CheckoutPaymentOptions)
def payment_methods() -> CheckoutPaymentOptions:
    return checkout_options()


# ── Order endpoints ──────────────────────────────────────────────────────


@app.post("/orders", response_model=OrderResponse, status_code=201)
def place_order(
    body: PlaceOrderRequest,
    request: Request,
    user: dict = Depends(require_user),
) -> OrderResponse:
    lines = cart.get_lines(request.session)
    coupon, coupon_message = cart.current_coupon(request.session)
    if coupon_message:
        raise HTTPException(status_code=409, detail=coupon_message)

    if not is_method_enabled(body.payment_method.value):
        raise HTTPException(status_code=400, detail="Payment method is not available")

    totals = compute_totals(lines, coupon.discount if coupon else 0.0)
    try:
        order = order_store.place_order(
            user["id"], lines, totals, body, coupon.code if coupon else None
        )
    except OrderError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    cart.clear_cart(request.session)
    record_event("order_placed", {
        "order_id": order.id,
        "total": totals.total,
        "coupon": order.coupon_code,
        "payment_method": order.payment_method.value,
    })
    return OrderResponse(order=order, message="Order created successfully")


@app.get("/orders/my-orders", response_model=OrderListResponse)
def my_orders(user: dict = Depends(require_user)) -> OrderListResponse:
    orders = order_store.list_orders_for_user(user["id"])
    return OrderListResponse(orders=orders, total=len(orders))


@app.get("/orders/track/{tracking_id}", response_model=OrderResponse)
def track_order(tracking_id: str) -> OrderResponse:
    try:
        return OrderResponse(order=order_store.get_by_tracking_id(tracking_id))
    except OrderNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.get("/orders/{order_id}", response_model=OrderResponse)
def order_detail(order_id: str, user: dict = Depends(require_user)) -> OrderResponse:
    return OrderResponse(order=_get_order_for(order_id, user))


@app.put("/orders/{order_id}/status", response_model=OrderResponse)
def order_status(
    order_id: str,
    body: StatusUpdateRequest,
    user: dict = Depends(require_admin),
) -> OrderResponse:
    try:
        return OrderResponse(order=order_store.update_status(order_id, body.status))
    except OrderNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OrderError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.delete("/orders/{order_id}")
def remove_order(order_id: str, user: dict = Depends(require_user)) -> dict:
    _get_order_for(order_id, user)
    order_store.delete_order(order_id)
    return {"status": "deleted", "message": "Order deleted successfully"}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/admin/stats")
def admin_stats(user: dict = Depends(require_admin)) -> dict:
    return compute_stats(get_events(), order_store.list_orders(), list_users())


@app.get("/admin/products", response_model=ProductListResponse)
def admin_products(user: dict = Depends(require_admin)) -> ProductListResponse:
    result = data_store.list_products(include_inactive=True)
    return ProductListResponse(products=result, total=len(result))


@app.post("/products", response_model=Product, status_code=201)
def create_product(body: ProductCreate, user: dict = Depends(require_admin)) -> Product:
    product = data_store.create_product(body)
    invalidate()
    return product


@app.put("/products/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    body: ProductUpdate,
    user: dict = Depends(require_admin),
) -> Product:
    try:
        product = data_store.update_product(product_id, body)
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail="Product not found") from exc
    invalidate()
    return product


@app.delete("/products/{product_id}")
def delete_product(product_id: str, user: dict = Depends(require_admin)) -> dict:
    try:
        data_store.delete_product(product_id)
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail="Product not found") from exc
    invalidate()
    return {"status": "deleted", "message": "Product deleted successfully"}


@app.get("/admin/coupons", response_model=list[Coupon])
def admin_coupons(user: dict = Depends(require_admin)) -> list[Coupon]:
    return list_coupons()


@app.post("/admin/coupons", response_model=Coupon, status_code=201)
def admin_create_coupon(body: CouponCreate, user: dict = Depends(require_admin)) -> Coupon:
    try:
        return create_coupon(body)
    except CouponError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.put("/admin/coupons/{code}", response_model=Coupon)
def admin_update_coupon(
    code: str,
    body: CouponUpdate,
    user: dict = Depends(require_admin),
) -> Coupon:
    try:
        return update_coupon(code, body)
    except CouponError as exc:
        raise _coupon_http_error(exc) from exc


@app.delete("/admin/coupons/{code}")
def admin_delete_coupon(code: str, user: dict = Depends(require_admin)) -> dict:
    try:
        delete_coupon(code)
    except CouponError as exc:
        raise _coupon_http_error(exc) from exc
    return {"status": "deleted"}


@app.get("/admin/orders", response_model=OrderListResponse)
def admin_orders(user: dict = Depends(require_admin)) -> OrderListResponse:
    orders = order_store.list_orders()
    return OrderListResponse(orders=orders, total=len(orders))


@app.get("/admin/users", response_model=UserListResponse)
def admin_users(
    search: str | None = None,
    user: dict = Depends(require_admin),
) -> UserListResponse:
    users = list_users(search)
    return UserListResponse(users=users, total=len(users))


@app.put("/admin/users/{user_id}", response_model=UserOut)
def admin_update_user(
    user_id: str,
    body: UserUpdate,
    user: dict = Depends(require_admin),
) -> UserOut:
    try:
        return update_user(user_id, body)
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.delete("/admin/users/{user_id}")
def admin_delete_user(user_id: str, user: dict = Depends(require_admin)) -> dict:
    if user_id == user["id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    try:
        target = get_user(user_id)
        delete_user(user_id)
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logger.info("Admin %s deleted user %s", user["email"], target.email)
    return {"status": "deleted"}


@app.get("/admin/payment-settings", response_model=PaymentSettings)
def admin_payment_settings(user: dict = Depends(require_admin)) -> PaymentSettings:
    return get_settings()


@app.put("/admin/payment-settings", response_model=PaymentSettings)
def admin_update_payment_settings(
    body: PaymentSettingsUpdate,
    user: dict = Depends(require_admin),
) -> PaymentSettings:
    try:
        return update_settings(body)
    except PaymentSettingsError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/admin/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
