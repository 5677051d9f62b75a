"""Type system, constraints, coercion and parsing internals for shapeguard."""
