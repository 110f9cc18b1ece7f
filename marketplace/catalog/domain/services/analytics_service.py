"""
AnalyticsService - admin reporting over accounts, projects and paid orders.

Only ``paid`` orders count as sales. Revenue is summed per order currency
without conversion.
"""

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from marketplace.catalog.domain.models import Project, ProjectCategory, ProjectStatus
from marketplace.services.base import BaseService, ServiceResult, service_ok
from payment_system.models import Order, OrderStatus
from utils.rbac import ROLES

User = get_user_model()

TOP_SELLING_LIMIT = 5
RECENT_TRANSACTIONS_LIMIT = 10
TREND_DAYS = 30


def _counts_by(queryset, field, keys):
    counts = dict.fromkeys(keys, 0)
    for row in queryset.order_by().values(field).annotate(count=Count("pk")):
        counts[row[field]] = row["count"]
    return counts


class AnalyticsService(BaseService):
    def _paid_orders(self):
        return Order.objects.filter(status=OrderStatus.PAID)

    @BaseService.log_performance
    def dashboard(self) -> ServiceResult:
        totals = self._paid_orders().aggregate(revenue=Sum("amount"), sales=Count("id"))
        return service_ok(
            {
                "totalUsers": User.objects.count(),
                "totalProjects": Project.objects.count(),
                "totalRevenue": totals["revenue"] or Decimal("0.00"),
                "totalSales": totals["sales"],
            }
        )

    @BaseService.log_performance
    def project_stats(self) -> ServiceResult:
        top_selling = (
            self._paid_orders()
            .filter(project__isnull=False)
            .values("project_id", "project__title")
            .annotate(sales_count=Count("id"), total_revenue=Sum("amount"))
            .order_by("-sales_count", "-total_revenue", "project__title")[:TOP_SELLING_LIMIT]
        )
        return service_ok(
            {
                "byCategory": _counts_by(Project.objects.all(), "category", ProjectCategory.values),
                "byStatus": _counts_by(Project.objects.all(), "status", ProjectStatus.values),
                "topSelling": [
                    {
                        "projectId": row["project_id"],
                        "title": row["project__title"],
                        "salesCount": row["sales_count"],
                        "totalRevenue": row["total_revenue"],
                    }
                    for row in top_selling
                ],
            }
        )

    @BaseService.log_performance
    def user_stats(self) -> ServiceResult:
        since = timezone.now() - timedelta(days=TREND_DAYS)
        return service_ok(
            {
                "byRole": _counts_by(User.objects.all(), "role", ROLES),
                "newUsersLast30Days": User.objects.filter(date_joined__gte=since).count(),
            }
        )

    @BaseService.log_performance
    def sales_stats(self) -> ServiceResult:
        """Daily paid revenue over the last 30 days plus the latest sales."""
        since = timezone.now() - timedelta(days=TREND_DAYS)
        trend = (
            self._paid_orders()
            .filter(paid_at__gte=since)
            .annotate(day=TruncDate("paid_at"))
            .values("day")
            .annotate(amount=Sum("amount"), sales=Count("id"))
            .order_by("day")
        )
        recent = self._paid_orders().select_related("buyer").order_by("-paid_at")[:RECENT_TRANSACTIONS_LIMIT]
        return service_ok(
            {
                "revenueTrend": [
                    {"date": row["day"], "amount": row["amount"], "sales": row["sales"]} for row in trend
                ],
                "recentTransactions": [
                    {
                        "orderId": order.pk,
                        "projectTitle": order.project_title,
                        "buyerEmail": order.buyer.email,
                        "amount": order.amount,
                        "currency": order.currency,
                        "transactionId": order.transaction_id,
                        "paidAt": order.paid_at,
                    }
                    for order in recent
                ],
            }
        )
