from flask import Blueprint

# Define the blueprint
auth_bp = Blueprint('auth_bp', __name__)

# Import the routes to register them with the blueprint
from . import routes  # noqa: E402,F401
