"""
Demo app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/demo/', include('demo.urls'))

Endpoint summary
----------------
POST /api/demo/orders/                  - Raised ValidationError.
POST /api/demo/orders/drafts/           - Returned serializer errors.
GET  /api/demo/orders/{id}/             - Raised / returned domain exception.
POST /api/demo/orders/{id}/cancel/      - Returned string on 409.
POST /api/demo/orders/{id}/pay/         - Conditional PaymentDeclined rules.
POST /api/demo/orders/{id}/fulfil/      - Rule mapping to no status code.
GET  /api/demo/inventory/               - Ignored TimeoutError.
GET  /api/demo/reports/                 - Unclassified, DRF and empty errors.
GET  /api/demo/legacy/orders/{id}/      - Plain Django view.
"""

from django.urls import path

from . import views

app_name = "demo"

urlpatterns = [
    path("orders/", views.OrderListView.as_view(), name="order-list"),
    path("orders/drafts/", views.OrderDraftView.as_view(), name="order-drafts"),
    path("orders/<int:order_id>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:order_id>/cancel/", views.OrderCancelView.as_view(), name="order-cancel"),
    path("orders/<int:order_id>/pay/", views.OrderPaymentView.as_view(), name="order-pay"),
    path("orders/<int:order_id>/fulfil/", views.OrderFulfilmentView.as_view(), name="order-fulfil"),
    path("inventory/", views.InventoryView.as_view(), name="inventory"),
    path("reports/", views.ReportView.as_view(), name="reports"),
    path("legacy/orders/<int:order_id>/", views.legacy_order_view, name="legacy-order-detail"),
]
