"""
Warehouse executor for Snowflake operations.

Warehouses hold no data and are created or replaced on every run so that
sizing changes in the configuration take effect.
"""

from typing import List

from snowkit.models import ResourceKind, ResourceSpec

from .base import BaseExecutor

WAREHOUSE_SIZES = frozenset({
    "XSMALL", "X-SMALL",
    "SMALL",
    "MEDIUM",
    "LARGE",
    "XLARGE", "X-LARGE",
    "XXLARGE", "X2LARGE", "2X-LARGE",
    "XXXLARGE", "X3LARGE", "3X-LARGE",
    "X4LARGE", "4X-LARGE",
    "X5LARGE", "5X-LARGE",
    "X6LARGE", "6X-LARGE",
})

WAREHOUSE_TYPES = frozenset({"STANDARD", "SNOWPARK-OPTIMIZED"})


class WarehouseExecutor(BaseExecutor):
    """Executor for virtual warehouses."""

    kind = ResourceKind.WAREHOUSE

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        errors = []
        size = resource.option("WAREHOUSE_SIZE")
        if size is not None and str(size).upper() not in WAREHOUSE_SIZES:
            errors.append(f"Unknown WAREHOUSE_SIZE '{size}' for {resource.name}")
        warehouse_type = resource.option("WAREHOUSE_TYPE")
        if warehouse_type is not None and str(warehouse_type).upper() not in WAREHOUSE_TYPES:
            errors.append(f"Unknown WAREHOUSE_TYPE '{warehouse_type}' for {resource.name}")
        auto_suspend = resource.option("AUTO_SUSPEND")
        if auto_suspend is not None and (isinstance(auto_suspend, bool) or not isinstance(auto_suspend, int)
                                         or auto_suspend < 0):
            errors.append(f"AUTO_SUSPEND of {resource.name} must be a non-negative number of seconds")
        return errors
