"""Core of eqparse: catalogs, options, IR and the equation language."""
