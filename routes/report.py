# routes/report.py
import logging

from flask import Blueprint, Response, current_app, request
from flask_login import login_required

from dao import report as report_dao
from dao import user as user_dao
from utils.pdf import render_sales_report

logger = logging.getLogger(__name__)

report_bp = Blueprint("report_api", __name__, url_prefix="/api/reports")


@report_bp.route("/pdf")
@login_required
def report_pdf():
    report_type = request.args.get("type") or "monthly"
    user_id = request.args.get("userId", type=int)
    now = current_app.extensions["clock"]()

    customer = user_dao.get_user(user_id) if user_id else None
    bills = report_dao.report_bills(report_type, user_id=user_id, now=now)
    start, end = report_dao.report_range(report_type, now)
    pdf = render_sales_report(
        bills, report_dao.summarize(bills), report_type, start, end, customer=customer
    )
    logger.info("sales report %s rendered, %d bills", report_type, len(bills))

    filename = f"sales-report-{report_type}-{now:%Y%m%d%H%M%S}.pdf"
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
