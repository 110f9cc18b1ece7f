from rest_framework import serializers

from utils.serializers import StrictSerializer

from .project_serializers import ProjectSerializer


class ListingSerializer(ProjectSerializer):
    """Public view of a listed project; review bookkeeping is left out."""

    class Meta(ProjectSerializer.Meta):
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
            "owner",
            "ownerId",
            "isForSale",
            "soldTo",
            "soldAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class CreateListingSerializer(StrictSerializer):
    projectId = serializers.UUIDField()


class UpdateListingSerializer(StrictSerializer):
    """Only the commercial fields of a listing can change."""

    title = serializers.CharField(min_length=3, max_length=200, required=False)
    description = serializers.CharField(min_length=10, max_length=5000, required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    deliveryTime = serializers.IntegerField(source="delivery_time", min_value=1, max_value=365, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs
