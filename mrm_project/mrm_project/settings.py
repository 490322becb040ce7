import os

from celery.schedules import crontab

# ────────────────────────────────────────────────────────────────────
# Paths
# ────────────────────────────────────────────────────────────────────
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ────────────────────────────────────────────────────────────────────
# Security / Debug
# ────────────────────────────────────────────────────────────────────
# Development fallback only; set DJANGO_SECRET_KEY in every deployment.
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-royalty-ledger-secret-key")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [
    h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",")
    if h.strip()
]

# ────────────────────────────────────────────────────────────────────
# Applications
# ────────────────────────────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "royalty_core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # attaches request.financial_year (from ?financialYear= or the settings store)
    "royalty_core.middleware.FinancialYearMiddleware",
]

ROOT_URLCONF = "mrm_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "mrm_project.wsgi.application"

# ────────────────────────────────────────────────────────────────────
# Database (SQLite unless a path is supplied)
# ────────────────────────────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DATABASE_PATH", os.path.join(BASE_DIR, "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ────────────────────────────────────────────────────────────────────
# I18N / Time
# ────────────────────────────────────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")

# ────────────────────────────────────────────────────────────────────
# Royalty ledger defaults
# ────────────────────────────────────────────────────────────────────
# Seed for the "financialYear" setting when the settings store is empty
ROYALTY_DEFAULT_FY_START_YEAR = int(os.getenv("ROYALTY_DEFAULT_FY_START_YEAR", "2025"))
ROYALTY_DEFAULT_GBP_TO_INR_RATE = float(os.getenv("ROYALTY_DEFAULT_GBP_TO_INR_RATE", "110.50"))
ROYALTY_DEFAULT_USD_TO_INR_RATE = float(os.getenv("ROYALTY_DEFAULT_USD_TO_INR_RATE", "83.50"))

# ────────────────────────────────────────────────────────────────────
# Email (outstanding digest)
# ────────────────────────────────────────────────────────────────────
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST = os.getenv("SMTP_HOST", "localhost")
EMAIL_PORT = int(os.getenv("SMTP_PORT", "587"))
EMAIL_HOST_USER = os.getenv("SMTP_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("SMTP_PASS", "")
EMAIL_USE_TLS = env_bool("SMTP_USE_TLS", True)
DEFAULT_FROM_EMAIL = os.getenv("EMAIL_FROM", "billing@localhost")
OUTSTANDING_REPORT_RECIPIENTS = [
    r.strip() for r in os.getenv("OUTSTANDING_REPORT_RECIPIENTS", "").split(",") if r.strip()
]

# ────────────────────────────────────────────────────────────────────
# Celery
# ────────────────────────────────────────────────────────────────────
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TASK_ALWAYS_EAGER = env_bool("CELERY_TASK_ALWAYS_EAGER", False)
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    "daily-outstanding-report": {
        "task": "royalty_core.tasks.send_outstanding_notification",
        "schedule": crontab(
            hour=int(os.getenv("OUTSTANDING_REPORT_HOUR", "9")),
            minute=int(os.getenv("OUTSTANDING_REPORT_MINUTE", "0")),
        ),
    },
}

# ────────────────────────────────────────────────────────────────────
# Logging
# ────────────────────────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "royalty_core": {
            "handlers": ["console"],
            "level": os.getenv("ROYALTY_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
