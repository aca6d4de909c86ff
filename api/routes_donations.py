"""
api.routes_donations - /api/v1/donations endpoint.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services.donation_service import DonationService, DonationValidationError


@api_bp.route("/donations", methods=["POST"])
def create_donation():
    """POST /api/v1/donations  (JSON body, camelCase keys)"""
    data = request.get_json(silent=True) or {}
    session = get_session()
    try:
        donation = DonationService.create(session, data)
        session.commit()
        return jsonify(donation.to_dict()), 201
    except DonationValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    except LookupError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 404
    finally:
        session.close()
