import fitz

from stampdesk.core.stamps import ImageFormat, StampKind

PAGE_WIDTH = 210
PAGE_HEIGHT = 297

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def make_pdf_bytes(pages=3, width=PAGE_WIDTH, height=PAGE_HEIGHT, rotation=0):
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 40), f"Page {i + 1}", fontsize=14)
        if rotation:
            page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


def make_png_bytes(color, size=20):
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, size, size), False)
    pix.set_rect(pix.irect, color)
    return pix.tobytes("png")


def make_kind(kind_id="red", color=RED, size=60, image_format=ImageFormat.PNG,
              image_bytes=None, is_builtin=True):
    return StampKind(
        id=kind_id,
        label=kind_id.title(),
        default_size=size,
        image_bytes=image_bytes if image_bytes is not None else make_png_bytes(color),
        image_format=image_format,
        is_builtin=is_builtin,
    )




def make_split_png_bytes(left, right, size=20):
    """Square PNG whose left half is one color and right half another."""
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, size, size), False)
    half = size // 2
    pix.set_rect(fitz.IRect(0, 0, half, size), left)
    pix.set_rect(fitz.IRect(half, 0, size, size), right)
    return pix.tobytes("png")
