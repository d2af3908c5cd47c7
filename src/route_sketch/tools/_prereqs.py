"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, principal: bool = False, editor: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, principal=True, editor=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if principal and state.principal is None:
        raise ValueError("Sign in first with sign_in.")
    if editor and state.editor is None:
        raise ValueError(
            "Start editing first with new_route or edit_route."
        )
