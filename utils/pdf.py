# utils/pdf.py
"""
Sales report PDF: one summary page, then one page per bill.
"""
from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

SHOP_NAME = "Gurudatta trader's"

STEEL = HexColor("#4682B4")
STEEL_DARK = HexColor("#326496")
ALICE = HexColor("#F0F8FF")
CHARCOAL = HexColor("#323232")
SLATE_LIGHT = HexColor("#B4B4B4")
ROW_ALT = HexColor("#F5FAFF")
WHITE = HexColor("#FFFFFF")
STATUS_COLORS = {
    "paid": HexColor("#22A05A"),
    "partial": HexColor("#E69B1E"),
    "pending": HexColor("#D24646"),
}

W, H = A4
MARGIN = 42
LINE = 16
REPORT_LABELS = {"today": "Today", "monthly": "This Month", "yearly": "This Year"}
OVERVIEW_ROWS = 15


def format_price(amount) -> str:
    return f"Rs. {float(amount or 0):,.2f}"


class SalesReportPdf:
    def __init__(self, title="Sales Report"):
        self.buf = BytesIO()
        self.c = canvas.Canvas(self.buf, pagesize=A4)
        self.c.setTitle(title)
        self.c.setAuthor(SHOP_NAME)
        self.y = H - MARGIN

    # ─── primitives ───
    def text(self, s, x, y, size=10, bold=False, color=CHARCOAL, align="left"):
        self.c.saveState()
        self.c.setFillColor(color)
        self.c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        s = str(s)
        if align == "center":
            self.c.drawCentredString(x, y, s)
        elif align == "right":
            self.c.drawRightString(x, y, s)
        else:
            self.c.drawString(x, y, s)
        self.c.restoreState()

    def rect(self, x, y, w, h, fill=None, stroke=None):
        self.c.saveState()
        if fill:
            self.c.setFillColor(fill)
        if stroke:
            self.c.setStrokeColor(stroke)
        self.c.rect(x, y, w, h, fill=1 if fill else 0, stroke=1 if stroke else 0)
        self.c.restoreState()

    def rule(self, y, color=SLATE_LIGHT):
        self.c.saveState()
        self.c.setStrokeColor(color)
        self.c.setLineWidth(0.5)
        self.c.line(MARGIN, y, W - MARGIN, y)
        self.c.restoreState()

    def new_page(self):
        self.c.showPage()
        self.y = H - MARGIN

    def ensure_space(self, needed) -> bool:
        if self.y - needed < MARGIN + 20:
            self.new_page()
            return True
        return False

    # ─── sections ───
    def header(self, subtitle):
        self.rect(0, H - 110, W, 110, fill=STEEL)
        self.text(SHOP_NAME, W / 2, H - 55, size=24, bold=True, color=WHITE, align="center")
        self.text(subtitle, W / 2, H - 85, size=16, color=WHITE, align="center")
        self.y = H - 140

    def info_box(self, lines):
        h = LINE * len(lines) + 12
        self.rect(MARGIN, self.y - h, W - 2 * MARGIN, h, fill=ALICE, stroke=STEEL)
        y = self.y - LINE
        for ln in lines:
            self.text(ln, MARGIN + 8, y)
            y -= LINE
        self.y -= h + 20

    def summary_boxes(self, summary):
        box_w = (W - 2 * MARGIN - 14) / 2
        box_h = 64
        boxes = [
            ("Total Sales", [format_price(summary["totalSales"])]),
            ("Total Paid", [format_price(summary["totalPaid"])]),
            ("Total Pending", [format_price(summary["totalPending"])]),
            (
                "Payment Status",
                [
                    f"Paid: {summary['paid']}",
                    f"Partial: {summary['partial']}",
                    f"Pending: {summary['pending']}",
                ],
            ),
        ]
        for i, (title, values) in enumerate(boxes):
            col, row = i % 2, i // 2
            x = MARGIN + col * (box_w + 14)
            top = self.y - row * (box_h + 12)
            self.rect(x, top - box_h, box_w, box_h, fill=ALICE, stroke=STEEL)
            self.text(title, x + 10, top - 18, size=10, bold=True)
            vy = top - 36
            for v in values:
                self.text(v, x + 10, vy, size=12 if len(values) == 1 else 9, bold=len(values) == 1)
                vy -= 11
        self.y -= 2 * (box_h + 12) + 16

    def table(self, columns, rows):
        """columns: [(title, x offset, align)]"""

        def draw_head():
            self.rect(MARGIN, self.y - 18, W - 2 * MARGIN, 18, fill=STEEL)
            for title, dx, align in columns:
                self.text(title, MARGIN + dx, self.y - 13, size=9, bold=True, color=WHITE, align=align)
            self.y -= 20

        draw_head()
        for i, row in enumerate(rows):
            if self.ensure_space(LINE):
                draw_head()
            if i % 2 == 0:
                self.rect(MARGIN, self.y - LINE + 2, W - 2 * MARGIN, LINE, fill=ROW_ALT)
            for (title, dx, align), value in zip(columns, row):
                self.text(value, MARGIN + dx, self.y - 10, size=9, align=align)
            self.rule(self.y - LINE + 2)
            self.y -= LINE

    def bill_page(self, bill):
        self.new_page()
        status = bill.status.value if bill.status else ""
        self.rect(MARGIN, self.y - 34, W - 2 * MARGIN, 34, fill=ALICE, stroke=STEEL)
        self.text(bill.bill_number, MARGIN + 10, self.y - 22, size=14, bold=True, color=STEEL_DARK)
        self.rect(W - MARGIN - 80, self.y - 26, 70, 18, fill=STATUS_COLORS.get(status, STEEL))
        self.text(status.upper(), W - MARGIN - 45, self.y - 20, size=8, bold=True, color=WHITE, align="center")
        self.y -= 50

        user = bill.user
        self.text(f"Customer: {user.name} ({user.mobile_no})", MARGIN, self.y)
        self.text(f"Date: {bill.created_at:%d %b %Y %H:%M}", W - MARGIN, self.y, align="right")
        self.y -= 24

        self.table(
            [("Feed", 6, "left"), ("Qty", 300, "right"), ("Unit Price", 400, "right"), ("Total", 500, "right")],
            [
                (
                    it.feed.label if it.feed else f"#{it.feed_id}",
                    f"{float(it.quantity):g}",
                    format_price(it.unit_price),
                    format_price(it.total_price),
                )
                for it in bill.items
            ],
        )
        self.y -= 10
        for label, value in (
            ("Total Amount", bill.total_amount),
            ("Paid Amount", bill.paid_amount),
            ("Pending Amount", bill.pending_amount),
        ):
            self.ensure_space(LINE)
            self.text(label, W - MARGIN - 200, self.y, bold=True)
            self.text(format_price(value), W - MARGIN - 4, self.y, align="right")
            self.y -= LINE

        if bill.transactions:
            self.y -= 10
            self.ensure_space(3 * LINE)
            self.text("Payments", MARGIN, self.y, size=11, bold=True)
            self.y -= 8
            self.table(
                [("Date", 6, "left"), ("Description", 120, "left"), ("Amount", 500, "right")],
                [
                    (f"{t.created_at:%d %b %Y}", (t.description or "")[:60], format_price(t.amount))
                    for t in bill.transactions
                ],
            )

        self.text("Thank you for your business!", W / 2, MARGIN, size=9, color=SLATE_LIGHT, align="center")

    def output(self) -> bytes:
        self.c.save()
        return self.buf.getvalue()


def render_sales_report(bills, summary, report_type, start, end, customer=None) -> bytes:
    doc = SalesReportPdf()
    doc.header("Sales Report")

    info = [
        f"Report Type: {REPORT_LABELS.get(report_type, 'This Year')}",
        f"Period: {start:%d %b %Y} - {end:%d %b %Y}",
        f"Total Bills: {summary['count']}",
    ]
    if customer is not None:
        info.insert(1, f"Customer: {customer.name} ({customer.mobile_no})")
    doc.info_box(info)
    doc.summary_boxes(summary)

    doc.text("Bills Overview", MARGIN, doc.y, size=12, bold=True)
    doc.y -= 10
    doc.table(
        [("Bill Number", 6, "left"), ("Customer", 110, "left"), ("Date", 300, "left"), ("Amount", 440, "right"), ("Status", 500, "left")],
        [
            (
                b.bill_number,
                b.user.name[:20],
                f"{b.created_at:%d %b}",
                format_price(b.total_amount),
                b.status.value.upper(),
            )
            for b in bills[:OVERVIEW_ROWS]
        ],
    )
    if len(bills) > OVERVIEW_ROWS:
        doc.y -= 8
        doc.text(f"... and {len(bills) - OVERVIEW_ROWS} more bills (see detailed pages)", MARGIN, doc.y, size=9)

    for bill in bills:
        doc.bill_page(bill)
    return doc.output()
