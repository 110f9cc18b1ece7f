from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from infrastructure.container import container
from marketplace.models import Project, ProjectCategory
from utils.serializers import StrictSerializer


class UserSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(source="display_name", read_only=True)


class ProjectSerializer(serializers.ModelSerializer):
    """
    Full project representation.

    Every lifecycle and sale field is read-only here; they change only through
    the lifecycle and listing endpoints.
    """

    owner = UserSummarySerializer(read_only=True)
    ownerId = serializers.UUIDField(source="owner_id", read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    deliveryTime = serializers.IntegerField(source="delivery_time", read_only=True)
    mediaUrls = serializers.SerializerMethodField()
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True, allow_null=True)
    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True, allow_null=True)
    reviewedBy = serializers.UUIDField(source="reviewed_by_id", read_only=True, allow_null=True)
    reviewedAt = serializers.DateTimeField(source="reviewed_at", read_only=True, allow_null=True)
    isForSale = serializers.BooleanField(source="is_for_sale", read_only=True)
    soldTo = serializers.UUIDField(source="sold_to_id", read_only=True, allow_null=True)
    soldAt = serializers.DateTimeField(source="sold_at", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "category",
            "price",
            "deliveryTime",
            "media",
            "mediaUrls",
            "status",
            "rejectionReason",
            "owner",
            "ownerId",
            "submittedAt",
            "reviewedBy",
            "reviewedAt",
            "isForSale",
            "soldTo",
            "soldAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    @extend_schema_field(serializers.ListField(child=serializers.URLField()))
    def get_mediaUrls(self, obj):
        if not obj.media:
            return []
        storage = container.storage()
        return [storage.get_url(key) for key in obj.media]


class ProjectCreateSerializer(StrictSerializer):
    title = serializers.CharField(min_length=3, max_length=200)
    description = serializers.CharField(min_length=10, max_length=5000)
    category = serializers.ChoiceField(choices=ProjectCategory.choices)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    deliveryTime = serializers.IntegerField(source="delivery_time", min_value=1, max_value=365)


class ProjectUpdateSerializer(ProjectCreateSerializer):
    """Partial edit; status, owner and sale fields are not accepted."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs


class RejectProjectSerializer(StrictSerializer):
    reason = serializers.CharField(max_length=2000, trim_whitespace=True)


class PaginatedProjectsSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    count = serializers.IntegerField()
    total = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    currentPage = serializers.IntegerField()
    data = ProjectSerializer(many=True)
