from rest_framework import serializers

from marketplace.models import Review
from utils.serializers import StrictSerializer

from .project_serializers import UserSummarySerializer


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = UserSummarySerializer(read_only=True)
    projectId = serializers.UUIDField(source="project_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Review
        fields = ["id", "projectId", "reviewer", "rating", "comment", "createdAt", "updatedAt"]
        read_only_fields = fields


class CreateReviewSerializer(StrictSerializer):
    projectId = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class UpdateReviewSerializer(StrictSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide a rating or a comment.")
        return attrs
