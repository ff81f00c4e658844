#!/usr/bin/env python3
"""
Blank Template Builder

Renders the application form with no applicant data and writes it to
FORM_TEMPLATE_PATH. This is the PDF attached when a filled form cannot
be produced.
Usage: python scripts/build_blank_template.py [output.pdf]
"""
import os
import sys
sys.path.insert(0, '.')

from ats.core.config import get_settings
from ats.services.pdf_generator import create_application_form


def main():
    output = sys.argv[1] if len(sys.argv) > 1 else get_settings().form_template_path
    pdf_bytes = create_application_form({}, "")

    out_dir = os.path.dirname(output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output, "wb") as f:
        f.write(pdf_bytes)
    print(f"✅ Blank template written to {output} ({len(pdf_bytes)} bytes)")


if __name__ == "__main__":
    main()
