# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "edskit",
# ]
#
# [tool.uv.sources]
# edskit = { path = "../", editable = true }
# ///
"""Generate an .eds archive for a small plate, ready to load on the instrument."""

import sys

from edskit import RunDescription, write_eds

run = RunDescription(
    barcode="1337",
    name="Some experiment",
    operator="Someone",
    wells={
        "A1": "a001",
        "A2": "a002",
        "C4": "a028",
        "H12": False,  # no-template control
        "H11": True,  # positive control
    },
)

out = sys.argv[1] if len(sys.argv) > 1 else "out.eds"
write_eds(out, "C:\\somedir", "somefile.eds", run)
print(f"Wrote {out} with {len(run.wells)} wells")
