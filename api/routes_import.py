"""
api.routes_import - /api/v1/bulk-donations/upload endpoint.

Accepts a CSV file via multipart upload (field name 'file') and maps the
import outcome onto a status code:
  201 every row imported, 206 some rows rejected, 400 nothing imported.
"""

from flask import request, jsonify

from api import api_bp
from import_engine import run_import, ImportResult


def _rejected(reason: str):
    # Rejected before any row was read: nothing counts as a failed row.
    result = ImportResult()
    result.add_error(0, reason, count=False)
    return jsonify(result.to_dict()), 400


@api_bp.route("/bulk-donations/upload", methods=["POST"])
def api_upload_bulk_donations():
    """
    POST /api/v1/bulk-donations/upload

    Multipart: field name 'file'
    CSV format: campaignId,amount,donorEmail,donorFirstName,donorLastName,paymentMethod,message
    """
    f = request.files.get("file")
    if f is None:
        return _rejected("No file uploaded")

    content = f.read()
    if not content:
        return _rejected("File is empty")

    filename = (f.filename or "").lower()
    if not filename.endswith(".csv"):
        return _rejected("Only CSV files are allowed")

    result = run_import(content)

    if result.all_failed:
        status = 400
    elif result.failure_count > 0:
        status = 206
    else:
        status = 201
    return jsonify(result.to_dict()), status
