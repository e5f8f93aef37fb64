import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "order_desk.settings")

from django.core.asgi import get_asgi_application

application = get_asgi_application()
