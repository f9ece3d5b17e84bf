"""Test settings for the campaign booking project.

Runs against SQLite, executes Celery tasks eagerly and keeps static files
storage simple so the test suite has no external dependencies.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        'TEST': {'NAME': BASE_DIR / 'test-db.sqlite3'},  # noqa: F405
        'OPTIONS': {'timeout': 20},
    }
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

BROADCAST_KEEPALIVE_SECONDS = 1
