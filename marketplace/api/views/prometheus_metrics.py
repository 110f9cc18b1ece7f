from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny


@api_view(["GET"])
@permission_classes([AllowAny])
@throttle_classes([])
def prometheus_metrics(request):
    """Expose lifecycle, marketplace and payment counters for scraping."""
    return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
