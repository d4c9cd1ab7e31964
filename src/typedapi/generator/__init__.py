"""Turn an OpenAPI path table into a client.

Sub-modules:

* :mod:`~typedapi.generator.naming` -- operation names from ``operationId``
  or from the method and path.
* :mod:`~typedapi.generator.builder` -- :func:`build_client`, which creates
  one operation per path + method.
"""

from typedapi.generator.builder import build_client, iter_operations
from typedapi.generator.naming import operation_name

__all__ = ["build_client", "iter_operations", "operation_name"]
