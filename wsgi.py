# wsgi.py
from app import create_admin_app

# reports api (admin + customer endpoints)
application = create_admin_app()
app = application
