# Routes package


def register_blueprints(app):
    from storefront.api.main import main_bp
    from storefront.api.pricing import pricing_bp
    from storefront.api.membership import membership_bp
    from storefront.api.bookings import bookings_bp
    from storefront.api.admin import admin_bp

    for bp in (main_bp, pricing_bp, membership_bp, bookings_bp, admin_bp):
        app.register_blueprint(bp)
