"""Pure value converters for import rows.  ZERO I/O."""
