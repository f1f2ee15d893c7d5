"""Analysis module: Angular distributions vs Rutherford theory."""
