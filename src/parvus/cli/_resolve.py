"""Server import resolution for ``"module:attribute"`` strings.

Used by ``parvus run`` to locate a configured ``ParvusServer``.
"""

import importlib

from parvus.app import ParvusServer


def resolve_server(import_string: str) -> ParvusServer:
    """Resolve an import string to a ``ParvusServer`` instance.

    Accepts ``"module:attribute"``.  When the attribute is omitted it
    defaults to ``"server"``.  A callable that is not itself a server is
    treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``ParvusServer``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "server"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, ParvusServer):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, ParvusServer):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a ParvusServer instance"
        raise TypeError(msg)

    return obj
