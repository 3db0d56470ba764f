# lms/services/certificate_pdf.py
from io import BytesIO

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from lms.models.certificate import Certificate
from lms.services.certificate_service import verification_url

QR_SIZE = 40 * mm


def _qr_drawing(data: str, size: float = QR_SIZE) -> Drawing:
    widget = QrCodeWidget(data, barLevel="M")
    x1, y1, x2, y2 = widget.getBounds()
    drawing = Drawing(
        size, size, transform=[size / (x2 - x1), 0, 0, size / (y2 - y1), 0, 0]
    )
    drawing.add(widget)
    return drawing


def render_certificate_pdf(cert: Certificate) -> bytes:
    """A4 certificate with the holder, course, issue date, code and a QR
    code pointing at the public verification URL."""
    buf = BytesIO()
    width, height = A4
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle(f"Certificate {cert.code}")

    pdf.setFont("Helvetica-Bold", 24)
    pdf.drawCentredString(width / 2, height - 40 * mm, "Certificate of Completion")

    issued = cert.issued_at.strftime("%d %b %Y") if cert.issued_at else ""
    holder = cert.user.name if cert.user else f"User #{cert.user_id}"
    course = cert.course.title if cert.course else f"Course #{cert.course_id}"

    pdf.setFont("Helvetica", 14)
    y = height - 70 * mm
    for line in (
        "This is to certify that",
        holder,
        "has successfully completed the course",
        f'"{course}"',
        f"on {issued}.",
    ):
        pdf.drawCentredString(width / 2, y, line)
        y -= 10 * mm

    pdf.drawCentredString(width / 2, y - 10 * mm, f"Certificate Code: {cert.code}")

    pdf.setFont("Helvetica-Oblique", 12)
    pdf.drawRightString(width - 20 * mm, 80 * mm, "______________________")
    pdf.drawRightString(width - 20 * mm, 72 * mm, "Instructor / Admin Signature")

    renderPDF.draw(_qr_drawing(verification_url(cert.code)), pdf, width - 60 * mm, 20 * mm)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()
