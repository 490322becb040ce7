# Celery instance is defined in mrm_project/celery.py
# It points celery_app at the Django settings so tasks share configuration
from .celery import celery_app

# 'from mrm_project import *', only exports celery_app
__all__ = ("celery_app",)
