"""Legacy park file formats."""
