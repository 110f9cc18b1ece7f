from collections.abc import Mapping

from rest_framework import serializers


class StrictSerializer(serializers.Serializer):
    """
    Request schema that rejects keys it does not declare.

    Each write endpoint has exactly one of these; anything outside the
    declared fields (``status``, ``soldTo``, ``amount``...) fails validation
    instead of being silently dropped.
    """

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            unknown = sorted(set(data.keys()) - set(self.fields.keys()))
            if unknown:
                raise serializers.ValidationError({key: ["This field is not allowed."] for key in unknown})
        return super().to_internal_value(data)


class ErrorResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=False)
    message = serializers.CharField()
    error = serializers.CharField()
    errors = serializers.ListField(child=serializers.DictField(), required=False)
