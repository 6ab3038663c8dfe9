"""Courier example: two rules over a fake courier lookup.

The first rule fires (status 200 and a Bike or Car vehicle); the second
one is skipped because it expects status 400. ``obey demo`` runs them,
and ``obey run <file> --functions obey.demo:FUNCTIONS`` uses the same
functions for a rule file.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import typer

from obey.registry import FunctionRegistry

logger = logging.getLogger(__name__)

FUNCTIONS = FunctionRegistry()


@FUNCTIONS.register("getCourier")
async def get_courier(params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Return a courier record; stands in for a service call."""
    courier_id = (params or {}).get("courierId")
    logger.debug("Fetching courier %s", courier_id)
    return {
        "id": courier_id,
        "status": 200,
        "vehicle": "Bike",
        "courierInfo": {
            "name": "John Doe",
            "warehouse": "Izmir",
        },
    }


@FUNCTIONS.register("logCourierInfo")
async def log_courier_info(courier: dict[str, Any], params: Any = None) -> None:
    """Print the courier's status and vehicle with the rule's params to stderr.

    Stdout is left to the run report so ``--json`` output stays parseable.
    """
    typer.echo(
        json.dumps(
            {
                "courierInfo": {
                    "status": courier.get("status"),
                    "vehicle": courier.get("vehicle"),
                },
                "params": params,
            },
            indent=2,
        ),
        err=True,
    )


DEMO_RULES: list[dict[str, Any]] = [
    {
        "name": "courier-available",
        "before": {"func": "getCourier", "params": {"courierId": "6633d4699c759c778ab5b399"}},
        "conditions": {
            "and": [
                {"fact": "status", "operator": "STRICT_EQUAL", "value": 200},
            ],
            "or": [
                {"fact": "vehicle", "operator": "STRICT_EQUAL", "value": "Bike"},
                {"fact": "vehicle", "operator": "STRICT_EQUAL", "value": "Car"},
            ],
        },
        "after": {
            "func": "logCourierInfo",
            "params": {"message": "Rule work with success!", "success": True},
        },
    },
    {
        "name": "courier-bad-request",
        "before": {"func": "getCourier", "params": {"courierId": "6633d4699c759c778ab5b399"}},
        "conditions": {
            "and": [
                {"fact": "status", "operator": "STRICT_EQUAL", "value": 400},
            ],
        },
        "after": {
            "func": "logCourierInfo",
            "params": {"message": "Rule work with success!", "success": True},
        },
    },
]
