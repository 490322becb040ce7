""" Run workers and the scheduler with:
    "celery -A mrm_project worker -l info"
    "celery -A mrm_project beat -l info"
    -A mrm_project imports mrm_project/__init__.py, which exposes celery_app. """
from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "mrm_project.settings")

celery_app = Celery("mrm_project")

# read config from Django settings, using CELERY_ prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# autoload tasks from installed apps (royalty_core.tasks)
celery_app.autodiscover_tasks()
