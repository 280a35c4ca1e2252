from cmdx.errors import ScopeError
from cmdx.models import Scope


def resolve_scope(
    force_global: bool,
    force_local: bool,
    global_scope: Scope,
    local_scope: Scope | None,
) -> Scope:
    """Pick the single scope a mutating command targets.

    --global wins outright. Otherwise an existing local scope is used, and
    --local without one is an error. With nothing forced and no local scope,
    the global scope is the fallback.
    """
    if force_global:
        return global_scope
    if local_scope is not None:
        return local_scope
    if force_local:
        raise ScopeError("local option forced but no local scope is initialized")
    return global_scope
