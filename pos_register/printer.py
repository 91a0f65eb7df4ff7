"""Receipt printing on a USB ESC/POS thermal printer."""

from __future__ import annotations

import os
from pathlib import Path
from time import sleep

from pos_register.codec import Meal
from pos_register.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from pos_register.models import OrderLine, OrderSnapshot, SettlementReport
from pos_register.rendering import format_money

# Separator tuning values.
# Keep these grouped so thermal-print behavior can be tuned in one place.
_SECTION_SEPARATOR_HEIGHT_PX = 12
_SECTION_SEPARATOR_THICKNESS_PX = 3
_SECTION_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SECTION_SEPARATOR_PAUSE_SECONDS = 0.1
_RIGHT_GUTTER_PX = 8
_LINE_EXTRA_PX = 10
_FONT_OVERRIDE_ENV = "RECEIPT_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def to_print_label(line: OrderLine) -> str:
    """``<qty>x <meal label or item name>``."""
    selection = line.selection
    name = selection.kind.label if isinstance(selection, Meal) else selection.name
    return f"{line.quantity}x {name}"


def receipt_rows(snapshot: OrderSnapshot) -> list[tuple[str, str]]:
    """Receipt body as (left, right) text pairs; meal components print indented with no price."""
    rows: list[tuple[str, str]] = []
    for line in snapshot.lines:
        rows.append((to_print_label(line), format_money(line.line_total)))
        if isinstance(line.selection, Meal):
            rows.extend((f"    {component}", "") for component in line.selection.components())
    return rows


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path with macOS default behavior preserved.

    Resolution order:
    1. RECEIPT_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_row(left: str, right: str, font: object) -> object:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    probe_draw = ImageDraw.Draw(probe)
    right_width = probe_draw.textbbox((0, 0), right, font=font)[2] if right else 0
    left_max = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - _RIGHT_GUTTER_PX - right_width - 12
    left = _fit_text_to_px(left, font, max(40, left_max))

    bbox = probe_draw.textbbox((0, 0), left or right or " ", font=font)
    text_height = bbox[3] - bbox[1]
    canvas_height = max(12, text_height + _LINE_EXTRA_PX)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    # Offset by bbox top so descenders (g, y, p, etc.) are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), left, font=font, fill=0)
    if right:
        draw.text((PRINTER_WIDTH_PX - _RIGHT_GUTTER_PX - right_width, y), right, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_section_separator() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SECTION_SEPARATOR_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = max(0, (_SECTION_SEPARATOR_HEIGHT_PX - _SECTION_SEPARATOR_THICKNESS_PX) // 2)
    bottom = min(_SECTION_SEPARATOR_HEIGHT_PX - 1, top + _SECTION_SEPARATOR_THICKNESS_PX - 1)
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, bottom), fill=0)
    return img


def _print_section_separator(printer: object) -> None:
    """
    Print the separator in short stripes with tiny pauses.

    This reduces instantaneous heat so the line stays crisp instead of
    bleeding into adjacent dots.
    """
    separator = _render_section_separator()
    for top in range(0, separator.height, _SECTION_SEPARATOR_STRIPE_HEIGHT_PX):
        bottom = min(separator.height, top + _SECTION_SEPARATOR_STRIPE_HEIGHT_PX)
        stripe = separator.crop((0, top, PRINTER_WIDTH_PX, bottom))
        printer.image(stripe)
        if bottom < separator.height:
            sleep(_SECTION_SEPARATOR_PAUSE_SECONDS)


def print_receipt(snapshot: OrderSnapshot, report: SettlementReport) -> None:
    """Print a paid order: ticket number, lines, total, then cut."""
    if snapshot.is_empty:
        return

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font_path = resolve_printer_font_path()
    font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    header_font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE + 12)

    ticket = f"#{report.order_id}" if report.order_id is not None else ""
    printer.image(_render_row("PAID", ticket, header_font))
    _print_section_separator(printer)

    for left, right in receipt_rows(snapshot):
        printer.image(_render_row(left, right, font))

    _print_section_separator(printer)
    printer.image(_render_row("Total Paid", format_money(report.total), header_font))
    # Extra tail for easier tearing.
    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
