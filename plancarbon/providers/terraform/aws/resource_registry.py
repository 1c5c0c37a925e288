# plancarbon/providers/terraform/aws/resource_registry.py
from __future__ import annotations

from typing import Callable, Dict, Tuple

from .autoscaling_group import resolve_autoscaling_group
from .data import ami
from .db_instance import resolve_db_instance
from .instance import resolve_instance

RESOURCE_REGISTRY: Dict[str, Callable] = {
    "aws_instance": resolve_instance,
    "aws_db_instance": resolve_db_instance,
    "aws_autoscaling_group": resolve_autoscaling_group,
}

DATA_RESOURCE_REGISTRY: Dict[str, Callable] = {
    "aws_ami": ami,
}

TEMPLATE_TYPES: Tuple[str, ...] = ("aws_launch_template", "aws_launch_configuration")

__all__ = ["RESOURCE_REGISTRY", "DATA_RESOURCE_REGISTRY", "TEMPLATE_TYPES"]
