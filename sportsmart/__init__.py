"""SportsMart catalog API."""
