from django.urls import path

from ledger.views import (
    AdjustCreditAPIView,
    EarnCreditAPIView,
    RedeemCreditAPIView,
    TenantBalanceAPIView,
    TenantLedgerAPIView,
)

urlpatterns = [
    path("<str:tenant_id>/credits/earn", EarnCreditAPIView.as_view(), name="credits-earn"),
    path("<str:tenant_id>/credits/redeem", RedeemCreditAPIView.as_view(), name="credits-redeem"),
    path("<str:tenant_id>/credits/adjust", AdjustCreditAPIView.as_view(), name="credits-adjust"),
    path("<str:tenant_id>/credits/ledger", TenantLedgerAPIView.as_view(), name="credits-ledger"),
    path("<str:tenant_id>/credits/balance", TenantBalanceAPIView.as_view(), name="credits-balance"),
]
