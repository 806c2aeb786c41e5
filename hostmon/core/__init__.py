"""History store and update loop."""
