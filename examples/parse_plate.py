# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "edskit",
# ]
#
# [tool.uv.sources]
# edskit = { path = "../", editable = true }
# ///
"""Read plate metadata and per-well fluorescence from a completed .eds archive."""

import sys

from edskit import EDSError, parse

path = sys.argv[1] if len(sys.argv) > 1 else "test.eds"

try:
    result = parse(path)
except EDSError as e:
    sys.exit(f"Error ({e.kind.name}): {e}")

print("Metadata:", result.metadata.model_dump_json(indent=2))
for dye, series in result.wells.get("A1", {}).items():
    print(f"A1 {dye}: {len(series)} cycles, last = {series[max(series)]}")
