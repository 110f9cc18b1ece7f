from rest_framework.routers import SimpleRouter

from marketplace.api.views import ProjectViewSet

app_name = "projects"

router = SimpleRouter()
router.register("", ProjectViewSet, basename="project")

urlpatterns = router.urls
