from rest_framework import serializers


class DashboardSerializer(serializers.Serializer):
    """Platform-wide totals"""

    totalUsers = serializers.IntegerField()
    totalProjects = serializers.IntegerField()
    totalRevenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    totalSales = serializers.IntegerField()


class TopSellingProjectSerializer(serializers.Serializer):
    projectId = serializers.UUIDField()
    title = serializers.CharField()
    salesCount = serializers.IntegerField()
    totalRevenue = serializers.DecimalField(max_digits=12, decimal_places=2)


class ProjectStatsSerializer(serializers.Serializer):
    """Project counts per category and status plus the best sellers"""

    byCategory = serializers.DictField(child=serializers.IntegerField())
    byStatus = serializers.DictField(child=serializers.IntegerField())
    topSelling = TopSellingProjectSerializer(many=True)


class UserStatsSerializer(serializers.Serializer):
    byRole = serializers.DictField(child=serializers.IntegerField())
    newUsersLast30Days = serializers.IntegerField()


class RevenuePointSerializer(serializers.Serializer):
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    sales = serializers.IntegerField()


class RecentTransactionSerializer(serializers.Serializer):
    orderId = serializers.UUIDField()
    projectTitle = serializers.CharField()
    buyerEmail = serializers.EmailField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()
    transactionId = serializers.CharField()
    paidAt = serializers.DateTimeField()


class SalesStatsSerializer(serializers.Serializer):
    """Daily revenue for the last 30 days and the latest sales"""

    revenueTrend = RevenuePointSerializer(many=True)
    recentTransactions = RecentTransactionSerializer(many=True)


class CategorySerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
    listedCount = serializers.IntegerField()
