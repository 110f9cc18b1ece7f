import os

# SECRET_KEY must exist before the base settings module validates it
os.environ.setdefault("DJANGO_SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: E402,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

TESTING = True
ENVIRONMENT = "test"

EMAIL_SERVICE_BACKEND = "mock"
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
STORAGE_BACKEND = "local"
MEDIA_ROOT = BASE_DIR / "test_media"  # noqa: F405

PAYMENT_PROVIDER = "twocheckout"
PAYMENT_SANDBOX = True
TWOCHECKOUT_SELLER_ID = "901234567"
TWOCHECKOUT_PRIVATE_KEY = "test-private-key"
TWOCHECKOUT_SECRET_WORD = "tango"

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

OTEL_ENABLED = False

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405

# Enable SessionAuthentication for tests to support client.force_login()
REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"].append(  # noqa: F405
    "rest_framework.authentication.SessionAuthentication"
)
