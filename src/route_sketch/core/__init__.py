"""Route domain core: geometry, history, policy, query."""
