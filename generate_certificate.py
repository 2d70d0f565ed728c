import os
from io import BytesIO
from PyPDF2 import PdfReader, PdfWriter
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm

PAGE_SIZE = landscape(A4)
FONT_NAME = "Helvetica"

# (text template, font size, x from left, y from top)
LAYOUT = (
    ("Certificate of Completion", 24, 40 * mm, 50 * mm),
    ("Awarded to: {name}", 18, 40 * mm, 70 * mm),
    ("Score: {percent}%", 18, 40 * mm, 90 * mm),
)


def format_percent(value):
    """Render a numeric percent without a trailing '.0' for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:g}"


def _draw_text_layer(name, percent):
    packet = BytesIO()
    can = canvas.Canvas(packet, pagesize=PAGE_SIZE)
    can.setTitle("Certificate of Completion")
    can.setAuthor(name)

    # PDF coordinate system: (0,0) is bottom-left, layout is measured from the top
    page_height = PAGE_SIZE[1]
    can.setFillColorRGB(0, 0, 0)
    for template, size, x, y in LAYOUT:
        can.setFont(FONT_NAME, size)
        can.drawString(x, page_height - y, template.format(name=name, percent=percent))

    can.showPage()
    can.save()
    return packet.getvalue()


def generate_certificate(name, percent, template_path=None):
    """Render a completion certificate and return the PDF bytes.

    When `template_path` is given the text is merged onto the first page of that PDF.
    """
    percent_text = format_percent(percent)
    overlay = _draw_text_layer(name, percent_text)
    if template_path is None:
        return overlay

    if not os.path.exists(template_path):
        raise ValueError(f"Certificate template not found: {template_path}")

    # Merge overlay with template
    template_pdf = PdfReader(str(template_path))
    overlay_pdf = PdfReader(BytesIO(overlay))
    output_pdf = PdfWriter()
    page = template_pdf.pages[0]
    page.merge_page(overlay_pdf.pages[0])
    output_pdf.add_page(page)

    out = BytesIO()
    output_pdf.write(out)
    return out.getvalue()


if __name__ == "__main__":
    import sys
    name = sys.argv[1] if len(sys.argv) > 1 else "Alice"
    percent = sys.argv[2] if len(sys.argv) > 2 else "75"
    out_path = f"{name}_certificate.pdf"
    with open(out_path, "wb") as f:
        f.write(generate_certificate(name, percent))
    print(f"Certificate generated at: {out_path}")
