"""Runtime passes for the colony: day tick, event bank, resolvers and services."""
