"""
api.routes_campaigns - /api/v1/campaigns endpoints.
"""

from flask import request, jsonify
from sqlalchemy import select

from api import api_bp
from db import get_session, CampaignStatus, Donation
from services.campaign_service import CampaignService, CampaignValidationError
import config


@api_bp.route("/campaigns")
def list_campaigns():
    """GET /api/v1/campaigns?status=ACTIVE&limit=100&offset=0"""
    status_raw = request.args.get("status", "").strip().upper()
    try:
        limit = min(int(request.args.get("limit", config.API_DEFAULT_LIMIT)),
                    config.API_MAX_LIMIT)
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return jsonify({"error": "limit and offset must be integers"}), 400

    status = None
    if status_raw:
        try:
            status = CampaignStatus(status_raw)
        except ValueError:
            return jsonify({"error": f"unknown status {status_raw}"}), 400

    session = get_session()
    try:
        campaigns, total = CampaignService.list_all(session, status=status,
                                                    limit=limit, offset=offset)
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "campaigns": [c.to_dict() for c in campaigns],
        })
    finally:
        session.close()


@api_bp.route("/campaigns/<int:campaign_id>")
def get_campaign(campaign_id: int):
    """GET /api/v1/campaigns/{id}"""
    session = get_session()
    try:
        campaign = CampaignService.get(session, campaign_id)
        if not campaign:
            return jsonify({"error": "not found"}), 404
        return jsonify(campaign.to_dict())
    finally:
        session.close()


@api_bp.route("/campaigns", methods=["POST"])
def create_campaign():
    """POST /api/v1/campaigns  (JSON body, camelCase keys)"""
    data = request.get_json(silent=True) or {}
    session = get_session()
    try:
        campaign = CampaignService.create(session, data)
        session.commit()
        return jsonify(campaign.to_dict()), 201
    except CampaignValidationError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/campaigns/<int:campaign_id>/donations")
def list_campaign_donations(campaign_id: int):
    """GET /api/v1/campaigns/{id}/donations"""
    session = get_session()
    try:
        if not CampaignService.get(session, campaign_id):
            return jsonify({"error": "not found"}), 404
        donations = session.execute(
            select(Donation)
            .where(Donation.campaign_id == campaign_id)
            .order_by(Donation.id)
        ).scalars().all()
        return jsonify({
            "total": len(donations),
            "donations": [d.to_dict() for d in donations],
        })
    finally:
        session.close()
