"""
WSGI config for threadline project.
"""
import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'threadline.settings')
application = get_wsgi_application()
