from __future__ import annotations

from .cmd import generate_plan_json, get_plan, load_plan_json, terraform_version  # re-export for main.py
from .context import ParserContext
from .parser import parse_plan_json                                               # re-export for main.py
from .plan import Plan

__all__ = [
    "generate_plan_json",
    "get_plan",
    "load_plan_json",
    "terraform_version",
    "parse_plan_json",
    "ParserContext",
    "Plan",
]
