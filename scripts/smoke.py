import argparse
import tempfile
from pathlib import Path

import pymupdf
from PIL import Image
from pypdf import PdfReader, PdfWriter

from pdf_sign_mcp import sign_tools
from pdf_sign_mcp.errors import UnsupportedFormatError

# PyMuPDF can emit noisy stderr warnings for some synthetic PDFs even when operations succeed.
pymupdf.TOOLS.mupdf_display_errors(False)
pymupdf.TOOLS.mupdf_display_warnings(False)


def _make_blank_pdf(path: Path, pages: int) -> Path:
    w = PdfWriter()
    for _ in range(pages):
        w.add_blank_page(width=612, height=792)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        w.write(f)
    return path


def _write_test_image(path: Path, fmt: str) -> None:
    mode = "RGBA" if fmt == "PNG" else "RGB"
    img = Image.new(mode, (240, 90), (255, 255, 255, 0) if mode == "RGBA" else (255, 255, 255))
    for x in range(20, 220):
        img.putpixel((x, 45 + (x % 7) - 3), (0, 0, 80, 255) if mode == "RGBA" else (0, 0, 80))
    img.save(path, format=fmt)


def run_smoke(inputs_dir: Path | None, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    if inputs_dir is None:
        doc = _make_blank_pdf(out_dir / "document.pdf", pages=5)
        sig_png = out_dir / "sig.png"
        sig_jpg = out_dir / "sig.jpg"
        _write_test_image(sig_png, "PNG")
        _write_test_image(sig_jpg, "JPEG")
    else:
        doc = inputs_dir / "document.pdf"
        sig_png = inputs_dir / "sig.png"
        sig_jpg = inputs_dir / "sig.jpg"

    page_count = sign_tools.get_pdf_page_info(str(doc))["page_count"]
    assert page_count >= 1

    # All pages, default output name.
    res = sign_tools.sign_pdf(str(doc), str(sig_png), settings={"scale": 25})
    assert res["pages_signed"] == page_count, res
    assert len(PdfReader(res["output_path"]).pages) == page_count

    # Last page, grayscale stamp, half opacity.
    last = out_dir / "last.pdf"
    res = sign_tools.sign_pdf(
        str(doc),
        str(sig_jpg),
        str(last),
        settings={"mode": "last", "is_grayscale": True, "opacity": 0.5},
    )
    assert [p["page_index"] for p in res["placements"]] == [page_count - 1], res

    # Page range text feeding a custom selection.
    selected = sign_tools.parse_pages(str(doc), "1, 3-4, 99")["selected_pages"]
    custom = out_dir / "custom.pdf"
    res = sign_tools.sign_pdf(
        str(doc),
        str(sig_png),
        str(custom),
        settings={"mode": "custom", "selected_pages": selected, "per_page_positions": {"0": {"x": 50, "y": 50}}},
    )
    assert res["pages_signed"] == len(selected), res

    gif = out_dir / "sig.gif"
    Image.new("RGB", (4, 4)).save(gif, format="GIF")
    try:
        sign_tools.sign_pdf(str(doc), str(gif), str(out_dir / "never.pdf"))
    except UnsupportedFormatError:
        pass
    else:
        raise AssertionError("GIF signature should be rejected")


def main() -> int:
    ap = argparse.ArgumentParser(description="Smoke test for the signature stamping tools")
    ap.add_argument("--inputs-dir", type=Path, default=None, help="Optional dir containing document.pdf, sig.png, sig.jpg")
    ap.add_argument("--out-dir", type=Path, default=None, help="Output directory (defaults to a temp dir)")
    args = ap.parse_args()

    if args.out_dir is None:
        with tempfile.TemporaryDirectory(prefix="pdf-sign-smoke-") as td:
            out = Path(td)
            run_smoke(args.inputs_dir, out)
            print(f"OK: smoke test passed. outputs at {out}")
    else:
        run_smoke(args.inputs_dir, args.out_dir)
        print(f"OK: smoke test passed. outputs at {args.out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
