"""
Turning a raw method reference into a usable Method.
"""

from __future__ import annotations

from loguru import logger

from forne.errors import BundledScriptDefect, CompileError, ContractViolation
from forne.resources import CustomScript, InbuiltScript, RawMethod, ResourceTable
from forne.scripting import ScriptEngine

from .script import ScriptMethod


def resolve_method(raw: RawMethod, engine: ScriptEngine, resources: ResourceTable) -> ScriptMethod:
    """
    Compile a bundled or custom method script.

    Args:
        raw: Either the name of a bundled method or a custom script
        engine: Engine to compile with
        resources: Where bundled methods are looked up

    Returns:
        The compiled method

    Raises:
        UnknownScript: If an inbuilt name is not bundled.
        CompileError: If a custom script does not compile.
        ContractViolation: If a custom script has no valid RESPONSES.
        BundledScriptDefect: If a bundled script fails either way.
    """
    if isinstance(raw, InbuiltScript):
        source = resources.method_source(raw.name)
        try:
            script = engine.compile(source, raw.name)
            method = ScriptMethod.from_script(raw.name, script, trusted=True)
        except (CompileError, ContractViolation) as err:
            raise BundledScriptDefect(raw.name, err) from err
    elif isinstance(raw, CustomScript):
        script = engine.compile(raw.body, raw.name)
        method = ScriptMethod.from_script(raw.name, script)
    else:
        raise TypeError(f"expected an InbuiltScript or CustomScript, got {type(raw).__name__}")

    logger.debug(f"Resolved method {method!r}")
    return method
