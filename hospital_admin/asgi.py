"""
ASGI config for the hospital records API.

Plain HTTP only; requests are served concurrently by the ASGI server,
each with its own database connection.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hospital_admin.settings")

application = get_asgi_application()
