"""Terminal front end for aiblock."""
