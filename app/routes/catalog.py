from flask import Blueprint, request

from app.gateway import get_gateway
from app.services.catalog import CatalogService
from app.services.notifications import RequestNotifier
from app.utils import ok, error
from app.version import API_PREFIX

catalog_bp = Blueprint("catalog", __name__, url_prefix=API_PREFIX)


def _catalog():
    return CatalogService(get_gateway(), RequestNotifier())


def _flag(name):
    return (request.args.get(name) or "").lower() in ("1", "true", "yes")


@catalog_bp.route("/products", methods=["GET"])
def list_products():
    products = _catalog().products(
        q=request.args.get("q", "").strip(),
        category=request.args.get("category"),
    )
    return ok(products)


@catalog_bp.route("/products/<product_id>", methods=["GET"])
def get_product(product_id):
    product = _catalog().product(product_id)
    if product is None:
        return error("Product not found", status=404)
    return ok(product)


@catalog_bp.route("/destinations", methods=["GET"])
def list_destinations():
    destinations = _catalog().destinations(
        q=request.args.get("q", "").strip(),
        featured=_flag("featured"),
    )
    return ok(destinations)


@catalog_bp.route("/destinations/<destination_id>", methods=["GET"])
def get_destination(destination_id):
    catalog = _catalog()
    destination = catalog.destination(destination_id)
    if destination is None:
        return error("Destination not found", status=404)
    destination["hotels"] = catalog.hotels(destination_id=destination_id)
    destination["packages"] = catalog.packages(destination_id=destination_id)
    return ok(destination)


@catalog_bp.route("/hotels", methods=["GET"])
def list_hotels():
    hotels = _catalog().hotels(
        q=request.args.get("q", "").strip(),
        destination_id=request.args.get("destination_id"),
        budget=request.args.get("budget"),
    )
    return ok(hotels)


@catalog_bp.route("/packages", methods=["GET"])
def list_packages():
    return ok(_catalog().packages(destination_id=request.args.get("destination_id")))


@catalog_bp.route("/packages/<package_id>", methods=["GET"])
def get_package(package_id):
    package = _catalog().package(package_id)
    if package is None:
        return error("Package not found", status=404)
    return ok(package)
