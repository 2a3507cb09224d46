from app.routes import (
    catalog_bp,
    cart_bp,
    checkout_bp,
    orders_bp,
    bookings_bp,
    profile_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(profile_bp)
