"""Development settings for the car rental backend.

This module extends the base settings with development specific
configuration, such as enabling debug and allowing all hosts. Without a
``STRIPE_SECRET`` the emulated checkout gateway is used. Do not use these
settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Plain static storage; the manifest is only built by collectstatic
STORAGES['staticfiles'] = {  # noqa: F405
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}
