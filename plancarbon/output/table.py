# plancarbon/output/table.py
from __future__ import annotations

import shutil
from decimal import Decimal
from typing import List, Mapping, Optional

from rich.console import Console
from rich.table import Table

from plancarbon.schema.resource import ComputeResource, Resource

COLUMNS = (
    ("ADDRESS", "left"),
    ("PROVIDER", "left"),
    ("REGION", "left"),
    ("COUNT", "right"),
    ("VCPUS", "right"),
    ("MEMORY (MB)", "right"),
    ("CPU", "left"),
    ("GPUS", "left"),
    ("SSD (GB)", "right"),
    ("HDD (GB)", "right"),
    ("REPLICATION", "right"),
)


def _fmt_gb(x: Decimal) -> str:
    s = f"{x:f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s or "0"


def _row(resource: Resource) -> List[str]:
    ident = resource.identification
    head = [resource.address, str(ident.provider), ident.region, str(ident.count)]
    if not isinstance(resource, ComputeResource):
        return head + ["unsupported"] + [""] * (len(COLUMNS) - len(head) - 1)
    specs = resource.specs
    return head + [
        str(specs.vcpus),
        str(specs.memory_mb),
        specs.cpu_type,
        ", ".join(specs.gpu_types),
        _fmt_gb(specs.ssd_storage_gb),
        _fmt_gb(specs.hdd_storage_gb),
        str(specs.replication_factor),
    ]


def render_table(
    resources: Mapping[str, Resource], *, no_color: bool = False, width: Optional[int] = None
) -> str:
    """
    Return a string containing a Rich-rendered table, one row per resource
    sorted by address; unsupported resources are dimmed.
    """
    table = Table(
        show_header=True,
        header_style=None if no_color else "bold",
        box=None,
        pad_edge=False,
    )
    for title, justify in COLUMNS:
        table.add_column(title, justify=justify, no_wrap=(title == "ADDRESS"))

    for address in sorted(resources):
        resource = resources[address]
        style = None if resource.is_supported() or no_color else "dim"
        table.add_row(*_row(resource), style=style)

    if width is None:
        width = shutil.get_terminal_size((140, 20)).columns
    console = Console(no_color=no_color, force_terminal=not no_color, width=width)
    with console.capture() as cap:
        console.print(table)
    return cap.get()
